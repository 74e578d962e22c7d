"""Indexable training data"""
from ._training_set import DataPair, TrainingSet
from ._validate import validate_network_to_data

__all__ = [
    "DataPair",
    "TrainingSet",
    "validate_network_to_data",
]
