"""Top-level package for shimwalk.

shimwalk answers "which file actually runs?" for executables installed by
package managers and version managers. Pure path helpers live in
`shimwalk.paths`; filesystem-backed resolution lives in `shimwalk.resolution`.
"""

from .config import ConfigLoader, ShimwalkConfig
from .errors import BinaryNotFoundError, ShimwalkError
from .paths import (
    is_absolute,
    is_node_modules,
    is_path,
    is_relative,
    normalize_path,
    path_like_to_string,
    relative_path,
    relative_resolve,
    resolve_path,
    split_path,
    trim_leading_dot_slash,
)
from .resolution import (
    BinaryLocator,
    HostCapabilities,
    ShimResolver,
    find_binary,
    find_real_bin,
    find_real_npm,
    find_real_pnpm,
    find_real_yarn,
    is_shadow_bin_path,
    resolve_real_binary_path,
    which_bin,
    which_bin_async,
)

__all__ = [
    "BinaryLocator",
    "BinaryNotFoundError",
    "ConfigLoader",
    "HostCapabilities",
    "ShimResolver",
    "ShimwalkConfig",
    "ShimwalkError",
    "__version__",
    "find_binary",
    "find_real_bin",
    "find_real_npm",
    "find_real_pnpm",
    "find_real_yarn",
    "is_absolute",
    "is_node_modules",
    "is_path",
    "is_relative",
    "is_shadow_bin_path",
    "normalize_path",
    "path_like_to_string",
    "relative_path",
    "relative_resolve",
    "resolve_path",
    "resolve_real_binary_path",
    "split_path",
    "trim_leading_dot_slash",
    "which_bin",
    "which_bin_async",
]

__version__ = "0.1.0"
