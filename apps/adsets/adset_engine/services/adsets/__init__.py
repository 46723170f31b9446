from adset_engine.services.adsets.builder import build_adset_request
from adset_engine.services.adsets.service import AdSetService
from adset_engine.services.adsets.validator import validate_adset_params

__all__ = [
    "AdSetService",
    "build_adset_request",
    "validate_adset_params",
]
