import json

import pytest

from gambiteditor.catalog import ActionCatalog


PACK = {
    "sprites": {
        "Wind Sprite": {
            "baseId": 59,
            "nameId": 135,
            "attackRange": 3.0,
            "isRanged": True,
            "gambitPack": {
                "loopCount": -1,
                "timeLines": [
                    {"condition": "Self", "actionId": 12, "timing": 0, "description": "Aero", "actionParam": 0},
                    {
                        "condition": "None",
                        "actionId": 0,
                        "originalCondition": "TopHateTarget",
                        "originalActionId": 13,
                        "timing": 5,
                        "description": "Stone",
                        "actionParam": 1,
                        "radius": 5.0,
                    },
                    {
                        "condition": "HPSelfPctLessThanTarget",
                        "actionId": 14,
                        "timing": 10,
                        "description": "Water",
                        "actionParam": 0,
                        "hpThreshold": 30,
                    },
                ],
            },
        },
        "Bomb": {
            "baseId": 70,
            "nameId": 71,
            "attackRange": 1,
            "isRanged": False,
            "gambitPack": {
                "loopCount": 3,
                "ruleSets": [
                    {"condition": "Player", "actionId": 113, "coolDown": 3000, "actionParam": 0},
                ],
            },
        },
    }
}


GOLEM_PACK = {
    "golem": {
        "Stone Golem": {
            "baseId": 1,
            "nameId": 2,
            "attackRange": 2.5,
            "isRanged": False,
            "gambitPack": {
                "loopCount": -1,
                "timeLines": [
                    {"condition": "TopHateTarget", "actionId": 498, "timing": 0, "actionParam": 0},
                ],
            },
        },
        "Golem": {"baseId": 7, "nameId": 8, "attackRange": 2.5, "isRanged": False, "gambitPack": {"loopCount": 2}},
        "Clay Golem": {
            "gambitPack": {
                "timeLines": [
                    {"condition": "Self", "actionId": 505, "timing": 3, "actionParam": 0},
                ],
            },
        },
    }
}


def as_text(data) -> str:
    return json.dumps(data, indent=2)


@pytest.fixture
def pack_text():
    return as_text(PACK)


@pytest.fixture
def golem_text():
    return as_text(GOLEM_PACK)


@pytest.fixture
def catalog():
    return ActionCatalog({7: "Attack", 12: "Aero", 13: "Stone", 14: "Water", 113: "Rock Throw", 498: "Stone Punch"})


@pytest.fixture
def pack_data():
    return json.loads(as_text(PACK))


@pytest.fixture
def make_text():
    return as_text
