import drill

BASIC = ["Present", "Preterite", "Imperfect", "Future", "Conditional"]


def test_new_session_is_hidden_and_empty(conjugations):
    session = drill.QuizSession(conjugations)
    assert session.state == drill.QuizSession.HIDDEN
    assert session.answers == {}


def test_empty_answers_score_zero(conjugations):
    stats = drill.QuizSession(conjugations).compute_accuracy(BASIC)
    assert stats.correct == 0
    assert stats.total == 30
    assert stats.percentage == 0


def test_total_skips_empty_reference_cells(conjugations):
    stats = drill.QuizSession(conjugations).compute_accuracy(["Imperative Affirmative Present"])
    assert stats.total == 5


def test_no_visible_tenses(conjugations):
    stats = drill.QuizSession(conjugations).compute_accuracy([])
    assert (stats.correct, stats.total, stats.percentage) == (0, 0, 0)


def test_case_and_whitespace_are_ignored(conjugations):
    session = drill.QuizSession(conjugations)
    session.set_answer("Present", "yo", " Compro ")
    stats = session.compute_accuracy(["Present"])
    assert stats.correct == 1
    assert session.is_correct("Present", "yo")


def test_accents_matter(conjugations):
    session = drill.QuizSession(conjugations)
    session.set_answer("Present", "yo", "Compró")
    assert session.compute_accuracy(["Present"]).correct == 0
    assert session.is_wrong("Present", "yo")


def test_set_answer_overwrites(conjugations):
    session = drill.QuizSession(conjugations)
    session.set_answer("Present", "tú", "compra")
    session.set_answer("Present", "tú", "compras")
    assert session.answer("Present", "tú") == "compras"
    assert session.compute_accuracy(["Present"]).correct == 1


def test_answers_outside_visible_tenses_do_not_count(conjugations):
    session = drill.QuizSession(conjugations)
    session.set_answer("Subjunctive Present", "yo", "compre")
    session.set_answer("Nonexistent", "yo", "compro")
    session.set_answer("Present", "nadie", "compro")
    stats = session.compute_accuracy(["Present"])
    assert stats.correct == 0
    assert session.state == drill.QuizSession.HIDDEN


def test_is_wrong_ignores_empty_cells(conjugations):
    session = drill.QuizSession(conjugations)
    assert not session.is_wrong("Present", "yo")
    assert not session.is_wrong("Imperative Affirmative Present", "yo")


def test_reveal_fills_reference_forms(conjugations):
    session = drill.QuizSession(conjugations)
    session.toggle_reveal()

    assert session.state == drill.QuizSession.REVEALED
    assert session.answer("Present", "vosotros") == "compráis"
    assert "yo" not in session.answers["Imperative Affirmative Present"]
    stats = session.compute_accuracy(BASIC)
    assert stats.percentage == 100
    assert stats.correct == stats.total == 30


def test_reveal_limited_to_visible(conjugations):
    session = drill.QuizSession(conjugations)
    session.toggle_reveal(["Present"])
    assert list(session.answers) == ["Present"]
    assert session.compute_accuracy(["Present"]).percentage == 100
    assert session.compute_accuracy(["Preterite"]).correct == 0


def test_reveal_twice_clears_earlier_input(conjugations):
    session = drill.QuizSession(conjugations)
    session.set_answer("Present", "yo", "compro")
    session.toggle_reveal()
    session.toggle_reveal()

    assert session.state == drill.QuizSession.HIDDEN
    assert session.answers == {}
    assert session.compute_accuracy(BASIC).correct == 0


def test_typing_while_revealed_keeps_state(conjugations):
    session = drill.QuizSession(conjugations)
    session.toggle_reveal(BASIC)
    session.set_answer("Present", "yo", "nope")
    assert session.state == drill.QuizSession.REVEALED
    assert session.compute_accuracy(BASIC).correct == 29


def test_session_never_mutates_reference(conjugations):
    session = drill.QuizSession(conjugations)
    session.toggle_reveal()
    session.set_answer("Present", "yo", "otro")
    assert conjugations["Present"].form("yo") == "compro"


def test_repeated_visible_labels_count_once(conjugations):
    session = drill.QuizSession(conjugations)
    session.set_answer("Present", "yo", "compro")
    stats = session.compute_accuracy(["Present", "Present"])
    assert (stats.correct, stats.total) == (1, 6)
