# obslab/__init__.py
from .obsdim import ObsDimension, First, Last, Constant, Undefined, as_obsdim
from .errors import (
    TargetsError,
    UnsupportedContainer,
    ArityError,
    NobsMismatchError,
    ObsDimError,
)
from .config import TargetsConfig, load_config, get_config, set_config, config_context
from .access import nobs, getobs, default_obsdim
from .subset import DataSubset, datasubset
from .hooks import (
    Strategy,
    select_strategy,
    register_bulk_targets,
    register_single_target,
    register_observation_target,
)
from .resolve import resolve_targets, gettarget
from .iterate import TargetIterator, iter_targets
from .containers import (
    ObsContainer,
    RAMContainer,
    SyntheticContainer,
    LabeledRAMContainer,
    LabeledSyntheticContainer,
)
from .datasets import ContainerDataset

__all__ = [
    "ObsDimension",
    "First",
    "Last",
    "Constant",
    "Undefined",
    "as_obsdim",
    "TargetsError",
    "UnsupportedContainer",
    "ArityError",
    "NobsMismatchError",
    "ObsDimError",
    "TargetsConfig",
    "load_config",
    "get_config",
    "set_config",
    "config_context",
    "nobs",
    "getobs",
    "default_obsdim",
    "DataSubset",
    "datasubset",
    "Strategy",
    "select_strategy",
    "register_bulk_targets",
    "register_single_target",
    "register_observation_target",
    "resolve_targets",
    "gettarget",
    "TargetIterator",
    "iter_targets",
    "ObsContainer",
    "RAMContainer",
    "SyntheticContainer",
    "LabeledRAMContainer",
    "LabeledSyntheticContainer",
    "ContainerDataset",
]
