"""
Shared fixtures for the decoder tests.
"""

import copy

import pytest

from model_decoder import ModelTypeConfig


MINIMAL_CONFIG = {
    "key": "tst",
    "title": "Test unit",
    "reference_string": "TS-010:A",
    "grammar": {"model_part": ["GEN", "SIZE"], "feature_part": ["C1"]},
    "categories": [
        {"id": "GEN", "name": "Series", "position": "GEN", "group": "model", "codes": {"TS": "Test series"}},
        {"id": "SIZE", "name": "Unit Size", "position": "SIZE", "group": "model",
         "codes": {"010": "10 ton", "020": "20 ton"}},
        {"id": "C1", "name": "Supply Fan", "position": "C1", "group": "features",
         "codes": {"A": "Plenum fan", "B": "Belt drive fan"}},
    ],
    "navigation": [
        {"category": None, "name": "Model", "indent": False},
        {"category": "GEN", "name": "Series", "indent": True},
    ],
    "positions": {"GEN": [0, 2], "SIZE": [3, 6], "C1": [7, 8]},
    "rules": [
        {
            "condition": {"category": "SIZE", "codes": ["010"]},
            "affects": "C1",
            "valid_codes": ["A"],
            "message": "Small units use plenum fans",
            "hint": "Set C1 to A",
        }
    ],
}


@pytest.fixture
def minimal_config_dict():
    """A small, valid configuration in its JSON dictionary form."""
    return copy.deepcopy(MINIMAL_CONFIG)


@pytest.fixture
def minimal_config(minimal_config_dict):
    return ModelTypeConfig.from_dict(minimal_config_dict)
