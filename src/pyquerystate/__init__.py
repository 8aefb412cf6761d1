"""pyquerystate - Shared UI state mirrored into the URL query string."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyquerystate")
except PackageNotFoundError:
    __version__ = "0+local"
from pyquerystate.binding import BindingState, QueryBinding
from pyquerystate.browser import Browser, MemoryBrowser, SearchParams
from pyquerystate.codec import decode, encode, encode_key
from pyquerystate.config import HistoryMode, QueryStateConfig
from pyquerystate.exceptions import (
    BrowserUnavailableError,
    QueryStateConfigError,
    QueryStateDecodeError,
    QueryStateError,
    QueryStateStoreError,
)
from pyquerystate.host import QueryStateHost, release_query_state, use_query_state
from pyquerystate.models import HistoryEntry, Location, QueryValue, ValueShape
from pyquerystate.params import get_param_value, params_from_request
from pyquerystate.state.events import ChangeSource, SignalChange
from pyquerystate.state.store import Signal, SignalStore, default_store

__all__ = [
    "__version__",
    "BindingState",
    "Browser",
    "BrowserUnavailableError",
    "ChangeSource",
    "HistoryEntry",
    "HistoryMode",
    "Location",
    "MemoryBrowser",
    "QueryBinding",
    "QueryStateConfig",
    "QueryStateConfigError",
    "QueryStateDecodeError",
    "QueryStateError",
    "QueryStateHost",
    "QueryStateStoreError",
    "QueryValue",
    "SearchParams",
    "Signal",
    "SignalChange",
    "SignalStore",
    "ValueShape",
    "decode",
    "default_store",
    "encode",
    "encode_key",
    "get_param_value",
    "params_from_request",
    "release_query_state",
    "use_query_state",
]
