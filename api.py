#!/usr/bin/env python3
"""
FastAPI service for the Spanish conjugation drill.

This API reads the same SQLite verb store as the terminal drill in drill.py.
It lists the known infinitives, serves normalized conjugation tables keyed by
tense label, scores answer grids submitted by clients and serves regular-pattern
hints for each tense.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

import drill

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("examine.api")

app = FastAPI(
    title="Examine API",
    description="Spanish verb conjugation tables and answer scoring.",
    version="0.1.0",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_repository() -> drill.VerbRepository:
    return drill.VerbRepository(drill.DB_PATH)


def load_conjugations(
    repository: drill.VerbRepository, verb: str
) -> Mapping[str, drill.ConjugationEntry]:
    try:
        return repository.conjugations_for(verb)
    except (drill.RepositoryError, drill.EmptyInput):
        logger.exception("Failed to get conjugations for %r", verb)
        raise HTTPException(status_code=500, detail="Failed to get conjugations")


class VerbsOut(BaseModel):
    verbs: List[str]


class TenseGroupOut(BaseModel):
    name: str
    label: str
    tenses: List[str]


class ConjugationEntryOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    definition: str
    yo: Optional[str] = None
    tu: Optional[str] = Field(default=None, alias="tú")
    el: Optional[str] = Field(default=None, alias="él/ella/usted")
    nosotros: Optional[str] = None
    vosotros: Optional[str] = None
    ellos: Optional[str] = Field(default=None, alias="ellos/ellas/ustedes")
    infinitive: str


class ConjugationsOut(BaseModel):
    conjugations: Dict[str, ConjugationEntryOut]


class ScoreRequest(BaseModel):
    verb: str = ""
    answers: Dict[str, Dict[str, str]] = Field(default_factory=dict)
    groups: Optional[Dict[str, bool]] = None


class ScoreOut(BaseModel):
    correct: int
    total: int
    percentage: float
    tenses: List[str]


class HintOut(BaseModel):
    tense: str
    example: Optional[str] = None
    ending: Optional[str] = None
    example_verb: Optional[str] = None
    forms: Optional[Dict[str, Optional[str]]] = None


@app.get("/")
def root() -> Dict[str, str]:
    return {"message": "Examine API is ready.", "db": str(drill.DB_PATH)}


@app.get("/tense-groups", response_model=List[TenseGroupOut])
def list_tense_groups() -> List[TenseGroupOut]:
    return [
        TenseGroupOut(name=name, label=drill.TENSE_GROUP_LABELS[name], tenses=list(tenses))
        for name, tenses in drill.TENSE_GROUPS.items()
    ]


@app.get("/verbs", response_model=VerbsOut)
def list_verbs(repository: drill.VerbRepository = Depends(get_repository)) -> VerbsOut:
    try:
        verbs = repository.list_infinitives()
    except drill.RepositoryError:
        logger.exception("Failed to fetch verbs")
        raise HTTPException(status_code=500, detail="Failed to fetch verbs")
    return VerbsOut(verbs=verbs)


@app.get("/verbs/conjugations", response_model=ConjugationsOut)
def verb_conjugations(
    verb: Optional[str] = Query(default=None),
    repository: drill.VerbRepository = Depends(get_repository),
) -> ConjugationsOut:
    if not verb:
        raise HTTPException(status_code=400, detail="Verb parameter is required")
    conjugations = load_conjugations(repository, verb)
    return ConjugationsOut(
        conjugations={
            label: ConjugationEntryOut(**entry.as_dict()) for label, entry in conjugations.items()
        }
    )


@app.post("/verbs/score", response_model=ScoreOut)
def score_answers(
    payload: ScoreRequest,
    repository: drill.VerbRepository = Depends(get_repository),
) -> ScoreOut:
    if not payload.verb:
        raise HTTPException(status_code=400, detail="Verb parameter is required")
    groups = payload.groups if payload.groups is not None else drill.DEFAULT_TENSE_GROUPS
    unknown = [name for name in groups if name not in drill.TENSE_GROUPS]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown tense group: {', '.join(unknown)}")

    conjugations = load_conjugations(repository, payload.verb)
    visible = drill.select_tenses(conjugations, groups)
    session = drill.QuizSession(conjugations)
    for label, cells in payload.answers.items():
        for person, text in cells.items():
            session.set_answer(label, person, text)
    stats = session.compute_accuracy(visible)
    return ScoreOut(
        correct=stats.correct,
        total=stats.total,
        percentage=stats.percentage,
        tenses=visible,
    )


@app.get("/verbs/hints", response_model=HintOut)
def verb_hint(
    verb: Optional[str] = Query(default=None),
    tense: Optional[str] = Query(default=None),
) -> HintOut:
    if not verb or not tense:
        raise HTTPException(status_code=400, detail="Verb and tense parameters are required")
    if tense not in drill.TENSE_EXAMPLES:
        raise HTTPException(status_code=404, detail="No hint for this tense")
    hint = HintOut(tense=tense, example=drill.TENSE_EXAMPLES[tense])
    pattern = drill.regular_pattern(verb, tense)
    if pattern is None:
        return hint
    ending = drill.verb_ending(verb)
    hint.ending = ending
    hint.example_verb = drill.EXAMPLE_VERBS[ending]
    hint.forms = dict(zip(drill.PERSONS, pattern))
    return hint
