import sqlite3

import pytest

import drill

HEADER = (
    "infinitive,infinitive_english,mood,mood_english,tense,tense_english,verb_english,"
    "form_1s,form_2s,form_3s,form_1p,form_2p,form_3p,gerund,gerund_english,pastparticiple,pastparticiple_english"
)

VERB_CSV = "\n".join(
    [
        HEADER,
        "comprar,to buy,Indicativo,Indicative,Presente,Present,I buy,compro,compras,compra,compramos,compráis,compran,comprando,buying,comprado,bought",
        "comprar,to buy,Indicativo,Indicative,Pretérito,Preterite,I bought,compré,compraste,compró,compramos,comprasteis,compraron,comprando,buying,comprado,bought",
        "comprar,to buy,Indicativo,Indicative,Imperfecto,Imperfect,I used to buy,compraba,comprabas,compraba,comprábamos,comprabais,compraban,comprando,buying,comprado,bought",
        "comprar,to buy,Indicativo,Indicative,Futuro,Future,I will buy,compraré,comprarás,comprará,compraremos,compraréis,comprarán,comprando,buying,comprado,bought",
        "comprar,to buy,Indicativo,Indicative,Condicional,Conditional,I would buy,compraría,comprarías,compraría,compraríamos,compraríais,comprarían,comprando,buying,comprado,bought",
        "comprar,to buy,Indicativo,Indicative,Presente perfecto,Present Perfect,I have bought,he comprado,has comprado,ha comprado,hemos comprado,habéis comprado,han comprado,comprando,buying,comprado,bought",
        "comprar,to buy,Indicativo,Indicative,Pretérito anterior,Preterite (Archaic),I had bought,hube comprado,hubiste comprado,hubo comprado,hubimos comprado,hubisteis comprado,hubieron comprado,comprando,buying,comprado,bought",
        "comprar,to buy,Subjuntivo,Subjunctive,Presente,Present,I buy,compre,compres,compre,compremos,compréis,compren,comprando,buying,comprado,bought",
        "comprar,to buy,Imperativo Afirmativo,Imperative Affirmative,Presente,Present,Buy,,compra,compre,compremos,comprad,compren,comprando,buying,comprado,bought",
        "comprar,to buy,Imperativo Negativo,Imperative Negative,Presente,Present,Don't buy,,no compres,no compre,no compremos,no compréis,no compren,comprando,buying,comprado,bought",
        "vivir,to live,Indicativo,Indicative,Presente,Present,I live,vivo,vives,vive,vivimos,vivís,viven,viviendo,living,vivido,lived",
    ]
)


def build_store(path, content=VERB_CSV):
    conn = sqlite3.connect(path)
    try:
        drill.ensure_schema(conn)
        drill.import_csv_text(conn, content)
    finally:
        conn.close()
    return path


@pytest.fixture
def db_path(tmp_path):
    return build_store(tmp_path / "verbs.sqlite3")


@pytest.fixture
def repository(db_path):
    return drill.VerbRepository(db_path)


@pytest.fixture
def conjugations(repository):
    return repository.conjugations_for("comprar")
