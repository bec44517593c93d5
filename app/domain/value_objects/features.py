"""Plan feature bag: string keys mapped to scalar values"""

from typing import Any, Dict, Mapping, Union

FeatureValue = Union[bool, int, float, str]
FeatureSet = Dict[str, FeatureValue]


def parse_features(raw: Mapping[str, Any] | None) -> FeatureSet:
    """Validate a raw feature mapping; nested or null values are rejected."""
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValueError("Plan features must be a mapping")

    features: FeatureSet = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not key:
            raise ValueError("Feature keys must be non-empty strings")
        if not isinstance(value, (bool, int, float, str)):
            raise ValueError(f"Feature '{key}' must be a boolean, number or string")
        features[key] = value
    return features
