#!/usr/bin/env python3
"""
Terminal drill for Spanish verb conjugations.

Reads conjugation rows from the SQLite verb store, normalizes them into
tense-keyed tables, picks the tenses to practise and scores the answers.
The FastAPI service in api.py reuses the same repository and quiz logic.
"""
from __future__ import annotations

import argparse
import csv
import logging
import os
import random
import sqlite3
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from io import StringIO
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
DB_PATH = Path(os.environ.get("VERBS_DB_PATH") or BASE_DIR / "db" / "verbs.sqlite3")

TENSES_PER_TABLE = 3
CHAR_WIDTH = 10
COLUMN_PADDING = 32
MIN_COLUMN_WIDTH = 120

QUIT_COMMANDS = {"q", "quit", "exit"}
SHOW_COMMANDS = {"?", "help", "answer", "show"}
SKIP_COMMANDS = {"skip", "s"}
HINT_COMMANDS = {"hint", "h"}

PERSONS = ("yo", "tú", "él/ella/usted", "nosotros", "vosotros", "ellos/ellas/ustedes")
PERSON_COLUMNS = ("form_1s", "form_2s", "form_3s", "form_1p", "form_2p", "form_3p")

USE_COLORS = sys.stdout.isatty() and os.environ.get("NO_COLOR") is None
COLOR_RESET = "\033[0m"
COLOR_TENSE = "\033[96m"  # cyan
COLOR_TITLE = "\033[93m"  # yellow
COLOR_RIGHT = "\033[92m"  # green
COLOR_WRONG = "\033[91m"  # red


class RepositoryError(Exception):
    """Raised when the verb store cannot answer a lookup."""


class VerbNotFound(RepositoryError, LookupError):
    pass


class StoreUnavailable(RepositoryError):
    pass


class EmptyInput(ValueError):
    pass


class LabelCollision(ValueError):
    pass


class Mood(str, Enum):
    INDICATIVE = "Indicativo"
    SUBJUNCTIVE = "Subjuntivo"
    IMPERATIVE_AFFIRMATIVE = "Imperativo Afirmativo"
    IMPERATIVE_NEGATIVE = "Imperativo Negativo"


MOOD_PREFIXES: Dict[Mood, str] = {
    Mood.INDICATIVE: "",
    Mood.SUBJUNCTIVE: "Subjunctive ",
    Mood.IMPERATIVE_AFFIRMATIVE: "Imperative Affirmative ",
    Mood.IMPERATIVE_NEGATIVE: "Imperative Negative ",
}

BASE_TENSES = (
    "Present",
    "Preterite",
    "Imperfect",
    "Future",
    "Conditional",
    "Present Perfect",
    "Past Perfect",
    "Future Perfect",
    "Conditional Perfect",
)

TENSE_ORDER = (
    "Present",
    "Preterite",
    "Imperfect",
    "Future",
    "Conditional",
    "Present Perfect",
    "Past Perfect",
    "Future Perfect",
    "Conditional Perfect",
    "Subjunctive Present",
    "Subjunctive Imperfect",
    "Subjunctive Present Perfect",
    "Subjunctive Past Perfect",
    "Subjunctive Future",
    "Subjunctive Future Perfect",
    "Imperative Affirmative Present",
    "Imperative Negative Present",
)

TENSE_GROUPS: Dict[str, Tuple[str, ...]] = {
    "basic": ("Present", "Preterite", "Imperfect", "Future", "Conditional"),
    "perfect": ("Present Perfect", "Past Perfect", "Future Perfect", "Conditional Perfect"),
    "subjunctive": (
        "Subjunctive Present",
        "Subjunctive Imperfect",
        "Subjunctive Present Perfect",
        "Subjunctive Past Perfect",
        "Subjunctive Future",
        "Subjunctive Future Perfect",
    ),
    "imperative": ("Imperative Affirmative Present", "Imperative Negative Present"),
}

TENSE_GROUP_LABELS = {
    "basic": "Basic tenses (Present, Past, Future)",
    "perfect": "Perfect tenses (Present Perfect, etc.)",
    "subjunctive": "Subjunctive tenses",
    "imperative": "Imperative (Commands)",
}

DEFAULT_TENSE_GROUPS = {"basic": True, "perfect": False, "subjunctive": False, "imperative": False}

TENSE_EXAMPLES = {
    "Present": "I buy bread (habitual or current action)",
    "Preterite": "I bought bread yesterday (completed past action)",
    "Imperfect": "I used to buy bread when I was young (ongoing past action)",
    "Future": "I will buy bread tomorrow (future action)",
    "Conditional": "I would buy bread if I had money (hypothetical action)",
    "Present Perfect": "I have bought bread today (past action with present relevance)",
    "Past Perfect": "I had bought bread before the store closed (past action before another past action)",
    "Future Perfect": "I will have bought bread by noon (future action completed before another future time)",
    "Conditional Perfect": "I would have bought bread if I had known (hypothetical past action)",
    "Subjunctive Present": "I hope that you buy bread (uncertain/desired present action)",
    "Subjunctive Imperfect": "I wished that you bought bread (uncertain/desired past action)",
    "Subjunctive Present Perfect": "I hope that you have bought bread (uncertain/desired completed action)",
    "Subjunctive Past Perfect": "I wished that you had bought bread (uncertain/desired action before past)",
    "Subjunctive Future": "If you should buy bread... (hypothetical future action)",
    "Subjunctive Future Perfect": "If you should have bought bread... (hypothetical completed future action)",
    "Imperative Affirmative Present": "Buy bread! (present imperative)",
    "Imperative Negative Present": "Don't buy bread! (present imperative negative)",
}

EXAMPLE_VERBS = {"ar": "comprar", "er": "comer", "ir": "vivir"}

_ER_IR_ENDINGS = {
    "Preterite": ("í", "iste", "ió", "imos", "isteis", "ieron"),
    "Imperfect": ("ía", "ías", "ía", "íamos", "íais", "ían"),
    "Subjunctive Present": ("a", "as", "a", "amos", "áis", "an"),
    "Subjunctive Imperfect": ("iera", "ieras", "iera", "iéramos", "ierais", "ieran"),
    "Subjunctive Future": ("iere", "ieres", "iere", "iéremos", "iereis", "ieren"),
}

STEM_ENDINGS: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "ar": {
        "Present": ("o", "as", "a", "amos", "áis", "an"),
        "Preterite": ("é", "aste", "ó", "amos", "asteis", "aron"),
        "Imperfect": ("aba", "abas", "aba", "ábamos", "abais", "aban"),
        "Subjunctive Present": ("e", "es", "e", "emos", "éis", "en"),
        "Subjunctive Imperfect": ("ara", "aras", "ara", "áramos", "arais", "aran"),
        "Subjunctive Future": ("are", "ares", "are", "áremos", "areis", "aren"),
    },
    "er": dict(_ER_IR_ENDINGS, Present=("o", "es", "e", "emos", "éis", "en")),
    "ir": dict(_ER_IR_ENDINGS, Present=("o", "es", "e", "imos", "ís", "en")),
}

# Added to the whole infinitive.
INFINITIVE_ENDINGS = {
    "Future": ("é", "ás", "á", "emos", "éis", "án"),
    "Conditional": ("ía", "ías", "ía", "íamos", "íais", "ían"),
}

# Forms of haber followed by the past participle.
PERFECT_AUXILIARIES = {
    "Present Perfect": ("he", "has", "ha", "hemos", "habéis", "han"),
    "Past Perfect": ("había", "habías", "había", "habíamos", "habíais", "habían"),
    "Future Perfect": ("habré", "habrás", "habrá", "habremos", "habréis", "habrán"),
    "Conditional Perfect": ("habría", "habrías", "habría", "habríamos", "habríais", "habrían"),
    "Subjunctive Present Perfect": ("haya", "hayas", "haya", "hayamos", "hayáis", "hayan"),
    "Subjunctive Past Perfect": ("hubiera", "hubieras", "hubiera", "hubiéramos", "hubierais", "hubieran"),
    "Subjunctive Future Perfect": ("hubiere", "hubieres", "hubiere", "hubiéremos", "hubiereis", "hubieren"),
}

PARTICIPLE_ENDINGS = {"ar": "ado", "er": "ido", "ir": "ido"}
VOSOTROS_IMPERATIVE_ENDINGS = {"ar": "ad", "er": "ed", "ir": "id"}

CSV_COLUMNS = (
    "infinitive",
    "infinitive_english",
    "mood",
    "tense",
    "tense_english",
    "verb_english",
) + PERSON_COLUMNS


def color_text(content: str, color_code: str) -> str:
    if not USE_COLORS:
        return content
    return f"{color_code}{content}{COLOR_RESET}"


def normalize_answer(value: str) -> str:
    return value.strip().casefold()


def build_label_table() -> Dict[Tuple[Mood, str], str]:
    """Map every (mood, base tense) pair to its label, refusing collisions."""
    table: Dict[Tuple[Mood, str], str] = {}
    owners: Dict[str, Tuple[Mood, str]] = {}
    for mood, prefix in MOOD_PREFIXES.items():
        for tense in BASE_TENSES:
            label = f"{prefix}{tense}"
            if label in owners:
                raise LabelCollision(
                    f"Label {label!r} produced by both {owners[label]} and {(mood, tense)}."
                )
            owners[label] = (mood, tense)
            table[(mood, tense)] = label
    return table


LABEL_TABLE = build_label_table()


def check_label_table() -> None:
    missing = [label for label in TENSE_ORDER if label not in LABEL_TABLE.values()]
    if missing:
        raise LabelCollision(f"Tense order lists labels no mood produces: {', '.join(missing)}")
    for group, labels in TENSE_GROUPS.items():
        stray = [label for label in labels if label not in TENSE_ORDER]
        if stray:
            raise LabelCollision(f"Group {group!r} lists unknown labels: {', '.join(stray)}")


check_label_table()


def build_regular_patterns() -> Dict[str, Dict[str, Tuple[Optional[str], ...]]]:
    """Conjugate each model verb regularly for every displayed tense label."""
    patterns: Dict[str, Dict[str, Tuple[Optional[str], ...]]] = {}
    for ending, verb in EXAMPLE_VERBS.items():
        stem = verb[:-2]
        table: Dict[str, Tuple[Optional[str], ...]] = {}
        for label, endings in STEM_ENDINGS[ending].items():
            table[label] = tuple(stem + suffix for suffix in endings)
        for label, endings in INFINITIVE_ENDINGS.items():
            table[label] = tuple(verb + suffix for suffix in endings)
        participle = stem + PARTICIPLE_ENDINGS[ending]
        for label, auxiliaries in PERFECT_AUXILIARIES.items():
            table[label] = tuple(f"{auxiliary} {participle}" for auxiliary in auxiliaries)

        present = table["Present"]
        subjunctive = table["Subjunctive Present"]
        table["Imperative Affirmative Present"] = (
            None,
            present[2],
            subjunctive[2],
            subjunctive[3],
            stem + VOSOTROS_IMPERATIVE_ENDINGS[ending],
            subjunctive[5],
        )
        table["Imperative Negative Present"] = (None,) + tuple(f"no {form}" for form in subjunctive[1:])
        patterns[ending] = {label: table[label] for label in TENSE_ORDER}
    return patterns


REGULAR_PATTERNS = build_regular_patterns()


def verb_ending(infinitive: str) -> Optional[str]:
    base = infinitive.strip().lower()
    if base.endswith("se"):
        base = base[:-2]
    ending = base[-2:]
    return ending if ending in REGULAR_PATTERNS else None


def regular_pattern(infinitive: str, label: str) -> Optional[Tuple[Optional[str], ...]]:
    ending = verb_ending(infinitive)
    if ending is None:
        return None
    return REGULAR_PATTERNS[ending].get(label)


def parse_mood(value: str) -> Optional[Mood]:
    try:
        return Mood(value)
    except ValueError:
        return None


def tense_label(mood: Optional[Mood], tense_english: str) -> str:
    # Unknown moods share the indicative (empty) prefix.
    if mood is None:
        return tense_english
    label = LABEL_TABLE.get((mood, tense_english))
    if label is None:
        label = f"{MOOD_PREFIXES[mood]}{tense_english}"
    return label


@dataclass(frozen=True)
class ConjugationEntry:
    infinitive: str
    definition: str
    forms: Tuple[Optional[str], ...]

    def form(self, person: str) -> Optional[str]:
        return self.forms[PERSONS.index(person)]

    def as_dict(self) -> Dict[str, Optional[str]]:
        data: Dict[str, Optional[str]] = {"definition": self.definition}
        data.update(zip(PERSONS, self.forms))
        data["infinitive"] = self.infinitive
        return data


@dataclass(frozen=True)
class AccuracyStats:
    correct: int
    total: int
    percentage: float


def normalize_conjugations(
    rows: Sequence[Mapping],
    tenses: Mapping[str, str],
    definition: str,
    strict: bool = False,
) -> Mapping[str, ConjugationEntry]:
    """
    Group raw mood/tense rows of one verb into tables keyed by tense label.

    The first row producing a label wins; later rows with the same label are
    dropped. With ``strict`` a label shared by two different mood/tense pairs
    raises LabelCollision instead of being logged.
    """
    if not rows:
        raise EmptyInput("No conjugation rows to normalize.")

    grouped: Dict[str, ConjugationEntry] = {}
    sources: Dict[str, Tuple[str, str]] = {}
    for row in rows:
        mood = parse_mood(row["mood"])
        if mood is None:
            logger.warning("Unknown mood %r for %r, using indicative prefix.", row["mood"], row["infinitive"])
        tense_english = tenses.get(row["tense"])
        if not tense_english:
            logger.warning("No English name for tense %r, using it as is.", row["tense"])
            tense_english = row["tense"]

        label = tense_label(mood, tense_english)
        source = (row["mood"], row["tense"])
        if label in grouped:
            if sources[label] != source:
                message = f"Label {label!r} from {source} collides with {sources[label]}."
                if strict:
                    raise LabelCollision(message)
                logger.warning("%s Keeping the first one.", message)
            continue

        sources[label] = source
        grouped[label] = ConjugationEntry(
            infinitive=row["infinitive"],
            definition=definition,
            forms=tuple(row[column] for column in PERSON_COLUMNS),
        )
    return MappingProxyType(grouped)


def select_tenses(
    conjugations: Mapping[str, ConjugationEntry],
    enabled_groups: Mapping[str, bool],
) -> List[str]:
    enabled = [labels for group, labels in TENSE_GROUPS.items() if enabled_groups.get(group)]
    return [
        label
        for label in TENSE_ORDER
        if label in conjugations and any(label in labels for labels in enabled)
    ]


def paginate(labels: Sequence[str], page_size: int = TENSES_PER_TABLE) -> List[List[str]]:
    if page_size < 1:
        raise ValueError("Page size must be at least 1.")
    return [list(labels[start:start + page_size]) for start in range(0, len(labels), page_size)]


def column_width(
    conjugations: Mapping[str, ConjugationEntry],
    labels: Sequence[str],
    char_width: int = CHAR_WIDTH,
    padding: int = COLUMN_PADDING,
    min_width: int = MIN_COLUMN_WIDTH,
) -> int:
    longest = 0
    for label in labels:
        for form in conjugations[label].forms:
            if form and len(form) > longest:
                longest = len(form)
    return max(longest * char_width + padding, min_width)


def parse_tense_groups(text: str) -> Dict[str, bool]:
    names = [part.strip().lower() for part in text.split(",") if part.strip()]
    unknown = [name for name in names if name not in TENSE_GROUPS]
    if unknown:
        raise ValueError(f"Unknown tense group(s): {', '.join(unknown)}")
    return {group: group in names for group in TENSE_GROUPS}


class QuizSession:
    """
    Answers typed into one verb's grid.

    Two states: hidden and revealed. Revealing overwrites every answer with
    the reference form; hiding again clears the grid, so earlier input is
    gone after a reveal/hide round trip.
    """

    HIDDEN = "hidden"
    REVEALED = "revealed"

    def __init__(self, conjugations: Mapping[str, ConjugationEntry]) -> None:
        self.conjugations = conjugations
        self.answers: Dict[str, Dict[str, str]] = {}
        self.revealed = False

    @property
    def state(self) -> str:
        return self.REVEALED if self.revealed else self.HIDDEN

    def set_answer(self, label: str, person: str, text: str) -> None:
        self.answers.setdefault(label, {})[person] = text

    def answer(self, label: str, person: str) -> str:
        return self.answers.get(label, {}).get(person, "")

    def reference(self, label: str, person: str) -> Optional[str]:
        entry = self.conjugations.get(label)
        if entry is None or person not in PERSONS:
            return None
        return entry.form(person)

    def is_correct(self, label: str, person: str) -> bool:
        reference = self.reference(label, person)
        if not reference:
            return False
        return normalize_answer(self.answer(label, person)) == reference.casefold()

    def is_wrong(self, label: str, person: str) -> bool:
        if not self.answer(label, person) or not self.reference(label, person):
            return False
        return not self.is_correct(label, person)

    def toggle_reveal(self, visible_labels: Optional[Sequence[str]] = None) -> None:
        if self.revealed:
            self.answers = {}
            self.revealed = False
            return

        labels = list(self.conjugations) if visible_labels is None else visible_labels
        answers: Dict[str, Dict[str, str]] = {}
        for label in labels:
            entry = self.conjugations.get(label)
            if entry is None:
                continue
            answers[label] = {person: form for person, form in zip(PERSONS, entry.forms) if form}
        self.answers = answers
        self.revealed = True

    def compute_accuracy(self, visible_labels: Sequence[str]) -> AccuracyStats:
        correct = 0
        total = 0
        for label in dict.fromkeys(visible_labels):
            entry = self.conjugations.get(label)
            if entry is None:
                continue
            for person, reference in zip(PERSONS, entry.forms):
                if not reference:
                    continue
                total += 1
                if normalize_answer(self.answer(label, person)) == reference.casefold():
                    correct += 1
        percentage = (correct / total) * 100 if total else 0.0
        return AccuracyStats(correct=correct, total=total, percentage=percentage)


def ensure_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS verbs (
            infinitive TEXT NOT NULL,
            mood TEXT NOT NULL,
            tense TEXT NOT NULL,
            verb_english TEXT,
            form_1s TEXT,
            form_2s TEXT,
            form_3s TEXT,
            form_1p TEXT,
            form_2p TEXT,
            form_3p TEXT,
            UNIQUE(infinitive, mood, tense)
        );

        CREATE INDEX IF NOT EXISTS idx_verbs_infinitive ON verbs(infinitive);

        CREATE TABLE IF NOT EXISTS tense (
            tense TEXT PRIMARY KEY,
            tense_english TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS infinitive (
            infinitive TEXT PRIMARY KEY,
            infinitive_english TEXT NOT NULL
        );
        """
    )
    conn.commit()


def import_csv_text(conn: sqlite3.Connection, content: str) -> Dict[str, object]:
    reader = csv.DictReader(StringIO(content))
    missing = [column for column in CSV_COLUMNS if column not in (reader.fieldnames or [])]
    if missing:
        return {"added": 0, "skipped": 0, "errors": [f"Missing columns: {', '.join(missing)}."]}

    added = 0
    skipped = 0
    errors: List[str] = []
    for line, row in enumerate(reader, start=2):
        values = {column: (row.get(column) or "").strip() for column in CSV_COLUMNS}
        if not values["infinitive"] or not values["mood"] or not values["tense"]:
            errors.append(f"Line {line}: missing infinitive, mood or tense.")
            continue
        forms = [values[column] or None for column in PERSON_COLUMNS]
        cur = conn.execute(
            """
            INSERT OR IGNORE INTO verbs (
                infinitive, mood, tense, verb_english,
                form_1s, form_2s, form_3s, form_1p, form_2p, form_3p
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (values["infinitive"], values["mood"], values["tense"], values["verb_english"], *forms),
        )
        if cur.rowcount:
            added += 1
        else:
            skipped += 1
        if values["tense_english"]:
            conn.execute(
                "INSERT OR IGNORE INTO tense (tense, tense_english) VALUES (?, ?)",
                (values["tense"], values["tense_english"]),
            )
        if values["infinitive_english"]:
            conn.execute(
                "INSERT OR IGNORE INTO infinitive (infinitive, infinitive_english) VALUES (?, ?)",
                (values["infinitive"], values["infinitive_english"]),
            )
    conn.commit()
    return {"added": added, "skipped": skipped, "errors": errors}


def import_csv_file(db_path: Path, csv_path: Path) -> Dict[str, object]:
    raw = csv_path.read_bytes()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = raw.decode("latin-1")
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        ensure_schema(conn)
        return import_csv_text(conn, text)
    finally:
        conn.close()


class VerbRepository:
    """Read-only access to the verb store; every call opens its own connection."""

    def __init__(self, db_path: Optional[Path] = None) -> None:
        self.db_path = Path(db_path) if db_path is not None else DB_PATH

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(f"{self.db_path.resolve().as_uri()}?mode=ro", uri=True)
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Cannot open verb store at {self.db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Verb store query failed: {exc}") from exc
        finally:
            conn.close()

    def list_infinitives(self) -> List[str]:
        with self.connect() as conn:
            rows = conn.execute("SELECT DISTINCT infinitive FROM verbs ORDER BY infinitive").fetchall()
        return [row["infinitive"] for row in rows]

    def random_infinitive(self) -> str:
        verbs = self.list_infinitives()
        if not verbs:
            raise VerbNotFound("The verb store is empty.")
        return random.choice(verbs)

    def lookup(self, infinitive: str) -> Dict[str, object]:
        with self.connect() as conn:
            rows = conn.execute(
                """
                SELECT
                    infinitive,
                    mood,
                    tense,
                    verb_english,
                    form_1s,
                    form_2s,
                    form_3s,
                    form_1p,
                    form_2p,
                    form_3p
                FROM verbs
                WHERE infinitive = ?
                ORDER BY rowid
                """,
                (infinitive,),
            ).fetchall()
            if not rows:
                raise VerbNotFound(f"No conjugations found for verb: {infinitive}")
            tenses = {
                row["tense"]: row["tense_english"]
                for row in conn.execute("SELECT tense, tense_english FROM tense")
            }
            definition_row = conn.execute(
                "SELECT infinitive_english FROM infinitive WHERE infinitive = ?", (infinitive,)
            ).fetchone()

        if definition_row is None:
            logger.warning("No English definition stored for %r.", infinitive)
            definition = ""
        else:
            definition = definition_row["infinitive_english"]
        return {"rows": [dict(row) for row in rows], "tenses": tenses, "definition": definition}

    def conjugations_for(self, infinitive: str) -> Mapping[str, ConjugationEntry]:
        data = self.lookup(infinitive)
        return normalize_conjugations(data["rows"], data["tenses"], data["definition"])


def prompt_verb() -> str:
    while True:
        verb = input("Verb (infinitive): ").strip().lower()
        if verb:
            return verb
        print("Type at least one letter.")


def show_table(label: str, entry: ConjugationEntry) -> None:
    print(color_text(label, COLOR_TENSE))
    for person, form in zip(PERSONS, entry.forms):
        print(f"  - {person}: {form or '—'}")


def stats_line(stats: AccuracyStats) -> None:
    color = COLOR_RIGHT if stats.total and stats.correct == stats.total else COLOR_TITLE
    print(color_text(f"Progress: {stats.correct} / {stats.total} correct ({stats.percentage:.1f}%)", color))


def show_hint(infinitive: str, label: str) -> None:
    example = TENSE_EXAMPLES.get(label)
    if example:
        print(f"  Example usage: {example}")
    pattern = regular_pattern(infinitive, label)
    if pattern is None:
        print("  No regular pattern for this verb and tense.")
        return
    ending = verb_ending(infinitive)
    print(f"  Regular -{ending} pattern (e.g., {EXAMPLE_VERBS[ending]}):")
    for person, form in zip(PERSONS, pattern):
        if form:
            print(f"    {person}: {form}")


def ask_tense(session: QuizSession, label: str) -> Optional[str]:
    entry = session.conjugations[label]
    print("\n" + color_text(label, COLOR_TENSE))
    for person, reference in zip(PERSONS, entry.forms):
        if not reference:
            continue
        raw = input(f"  {person}: ").strip()
        lowered = raw.lower()
        while lowered in HINT_COMMANDS:
            show_hint(entry.infinitive, label)
            raw = input(f"  {person}: ").strip()
            lowered = raw.lower()
        if lowered in QUIT_COMMANDS:
            return "quit"
        if lowered in SHOW_COMMANDS:
            return "reveal"
        if lowered in SKIP_COMMANDS or raw == "":
            continue
        session.set_answer(label, person, raw)
        if session.is_correct(label, person):
            print(color_text("    ✓", COLOR_RIGHT))
        else:
            print(color_text("    ✗", COLOR_WRONG))
    return None


def drill_loop(
    session: QuizSession,
    visible: Sequence[str],
    page_size: int = TENSES_PER_TABLE,
) -> AccuracyStats:
    pages = paginate(visible, page_size)
    for number, page in enumerate(pages, start=1):
        print(f"\nTable {number}/{len(pages)}: {', '.join(page)}")
        for label in page:
            result = ask_tense(session, label)
            if result == "quit":
                print("Drill stopped.")
                return session.compute_accuracy(visible)
            if result == "reveal":
                before = session.compute_accuracy(visible)
                print("Score before revealing:")
                stats_line(before)
                session.toggle_reveal(visible)
                for shown in visible:
                    show_table(shown, session.conjugations[shown])
                return before
        stats_line(session.compute_accuracy(visible))
    return session.compute_accuracy(visible)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Practise Spanish verb conjugations in the terminal.")
    parser.add_argument("--db", help=f"Path to the verb store (default: {DB_PATH})")
    parser.add_argument("--import", dest="import_csv", metavar="CSV", help="Load a conjugation CSV into the store first")
    parser.add_argument("--verb", help="Infinitive to practise")
    parser.add_argument("--random", action="store_true", help="Pick a random verb")
    parser.add_argument(
        "--groups",
        help=f"Comma-separated tense groups ({', '.join(TENSE_GROUPS)}); default: basic",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    db_path = Path(args.db) if args.db else DB_PATH

    if args.import_csv:
        result = import_csv_file(db_path, Path(args.import_csv))
        print(f"Imported {result['added']} rows, skipped {result['skipped']}.")
        for error in result["errors"]:
            print(f"  ! {error}")
        if not args.verb and not args.random:
            return 0

    try:
        enabled_groups = parse_tense_groups(args.groups) if args.groups else dict(DEFAULT_TENSE_GROUPS)
    except ValueError as exc:
        print(exc)
        return 2

    repository = VerbRepository(db_path)
    try:
        verb = repository.random_infinitive() if args.random else (args.verb or prompt_verb())
        conjugations = repository.conjugations_for(verb)
    except RepositoryError as exc:
        print(f"Could not load the verb: {exc}")
        return 1

    visible = select_tenses(conjugations, enabled_groups)
    if not visible:
        print("None of the selected tenses exist for this verb.")
        return 1

    definition = conjugations[visible[0]].definition
    print(color_text(f"{verb}: {definition}" if definition else verb, COLOR_TITLE))
    print("Type 'hint' for the regular pattern, '?' to reveal every answer or 'q' to quit. Leave a cell empty to skip it.")

    session = QuizSession(conjugations)
    try:
        stats = drill_loop(session, visible)
    except (KeyboardInterrupt, EOFError):
        print("\nInterrupted.")
        stats = session.compute_accuracy(visible)
    print("\nDone! 🏁")
    if not session.revealed:
        stats_line(stats)
    return 0


if __name__ == "__main__":
    sys.exit(main())
