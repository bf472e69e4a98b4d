import os
from datetime import datetime
from typing import Optional


def timestamped_path(
    out_dir: str,
    prefix: str,
    suffix: str,
    stamp: Optional[str] = None,
) -> str:
    """Return ``<out_dir>/<prefix>_<stamp><suffix>`` without clobbering files.

    The directory is created. When the name is taken (several outputs in the
    same second) ``-2``, ``-3`` ... is appended to the stamp.
    """
    os.makedirs(out_dir, exist_ok=True)
    if stamp is None:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = os.path.join(out_dir, f"{prefix}_{stamp}{suffix}")
    counter = 2
    while os.path.exists(path):
        path = os.path.join(out_dir, f"{prefix}_{stamp}-{counter}{suffix}")
        counter += 1
    return path
