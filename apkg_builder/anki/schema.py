"""
Anki collection schema (version 11) and the fixed values of its ``col`` row.
"""

from typing import Any, Dict

SCHEMA_VERSION = 11

APKG_SCHEMA = """
CREATE TABLE col (
    id              integer primary key,
    crt             integer not null,
    mod             integer not null,
    scm             integer not null,
    ver             integer not null,
    dty             integer not null,
    usn             integer not null,
    ls              integer not null,
    conf            text not null,
    models          text not null,
    decks           text not null,
    dconf           text not null,
    tags            text not null
);
CREATE TABLE notes (
    id              integer primary key,
    guid            text not null,
    mid             integer not null,
    mod             integer not null,
    usn             integer not null,
    tags            text not null,
    flds            text not null,
    sfld            integer not null,
    csum            integer not null,
    flags           integer not null,
    data            text not null
);
CREATE TABLE cards (
    id              integer primary key,
    nid             integer not null,
    did             integer not null,
    ord             integer not null,
    mod             integer not null,
    usn             integer not null,
    type            integer not null,
    queue           integer not null,
    due             integer not null,
    ivl             integer not null,
    factor          integer not null,
    reps            integer not null,
    lapses          integer not null,
    left            integer not null,
    odue            integer not null,
    odid            integer not null,
    flags           integer not null,
    data            text not null
);
CREATE TABLE revlog (
    id              integer primary key,
    cid             integer not null,
    usn             integer not null,
    time            integer not null,
    ease            integer not null,
    ivl             integer not null,
    lastIvl         integer not null,
    factor          integer not null,
    type            integer not null
);
CREATE TABLE graves (
    usn             integer not null,
    oid             integer not null,
    type            integer not null
);
CREATE INDEX ix_notes_usn on notes (usn);
CREATE INDEX ix_cards_usn on cards (usn);
CREATE INDEX ix_revlog_usn on revlog (usn);
CREATE INDEX ix_cards_nid on cards (nid);
CREATE INDEX ix_cards_sched on cards (did, queue, due);
CREATE INDEX ix_revlog_cid on revlog (cid);
CREATE INDEX ix_notes_csum on notes (csum);
"""

INSERT_COL = "INSERT INTO col VALUES(null,?,?,?,?,?,?,?,?,?,?,?,?)"
INSERT_NOTE = "INSERT INTO notes VALUES(?,?,?,?,?,?,?,?,?,?,?)"
INSERT_CARD = "INSERT INTO cards VALUES(?,?,?,?,?,?,?,?,?,?,?,?,?,?,?,?,?,?)"

# Creation/modification stamps of the template collection every package starts from.
COLLECTION_CREATED = 1411124400
COLLECTION_MODIFIED = 1425279151694
SCHEMA_MODIFIED = 1425279151690

DEFAULT_DECK_ID = 1

COLLECTION_CONF: Dict[str, Any] = {
    'activeDecks': [DEFAULT_DECK_ID],
    'addToCur': True,
    'collapseTime': 1200,
    'curDeck': DEFAULT_DECK_ID,
    'curModel': '1425279151691',
    'dueCounts': True,
    'estTimes': True,
    'newBury': True,
    'newSpread': 0,
    'nextPos': 1,
    'sortBackwards': False,
    'sortType': 'noteFld',
    'timeLim': 0,
}

DEFAULT_DECK: Dict[str, Any] = {
    'collapsed': False,
    'conf': 1,
    'desc': '',
    'dyn': 0,
    'extendNew': 10,
    'extendRev': 50,
    'id': DEFAULT_DECK_ID,
    'lrnToday': [0, 0],
    'mod': 1425279151,
    'name': 'Default',
    'newToday': [0, 0],
    'revToday': [0, 0],
    'timeToday': [0, 0],
    'usn': 0,
}

DEFAULT_DECK_CONFIG: Dict[str, Any] = {
    'autoplay': True,
    'id': 1,
    'lapse': {
        'delays': [10],
        'leechAction': 0,
        'leechFails': 8,
        'minInt': 1,
        'mult': 0,
    },
    'maxTaken': 60,
    'mod': 0,
    'name': 'Default',
    'new': {
        'bury': True,
        'delays': [1, 10],
        'initialFactor': 2500,
        'ints': [1, 4, 7],
        'order': 1,
        'perDay': 20,
        'separate': True,
    },
    'replayq': True,
    'rev': {
        'bury': True,
        'ease4': 1.3,
        'fuzz': 0.05,
        'ivlFct': 1,
        'maxIvl': 36500,
        'minSpace': 1,
        'perDay': 100,
    },
    'timer': 0,
    'usn': 0,
}
