# Models package for automobile trip emission committees
"""
Versioned committee sets.

    impact — multi-gas model, canonical and the default
    carbon — legacy per-liter model

Each model is a frozen Registry. Pick one by name with `get_model`.
"""

from ..decision.registry import Registry
from ..domain import ConfigurationError
from .carbon import CARBON_MODEL
from .impact import IMPACT_MODEL

DEFAULT_MODEL = "impact"

# The quantity each model exists to estimate.
DEFAULT_TARGETS = {
    "impact": "carbon",
    "carbon": "emission",
}

MODELS: dict[str, Registry] = {
    IMPACT_MODEL.name: IMPACT_MODEL,
    CARBON_MODEL.name: CARBON_MODEL,
}


def get_model(name: str = DEFAULT_MODEL) -> Registry:
    """Look up a model registry by name."""
    try:
        return MODELS[name.strip().lower()]
    except KeyError:
        valid = ", ".join(sorted(MODELS))
        raise ConfigurationError(f"Unknown model '{name}' (valid: {valid})") from None
