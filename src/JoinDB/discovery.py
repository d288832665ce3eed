import os
import logging
from concurrent.futures import ThreadPoolExecutor

from .errors import DiscoveryError, NotFoundError

logger = logging.getLogger(__name__)

DIRECTORY = 'directory'
CANDIDATE = 'candidate'
IRRELEVANT = 'irrelevant'

DISCOVERY_WORKERS = 8


def normalize_extensions(extensions):
    return {ext.strip().lstrip('.').lower() for ext in extensions if ext.strip().lstrip('.')}


def classify_path(path):
    """Return (kind, extension) for a filesystem entry.

    extension is lower-cased and only set for CANDIDATE entries.
    """
    if os.path.isdir(path):
        return DIRECTORY, None

    _, dot, ext = os.path.basename(path).rpartition('.')
    if not dot or not ext:
        return IRRELEVANT, None
    return CANDIDATE, ext.lower()


def list_directory(path):
    logger.info(f"search db's in {path}")
    try:
        children = sorted(os.listdir(path))
    except OSError as e:
        raise DiscoveryError(f"Cannot list directory {path}: {e}") from e
    return [os.path.join(path, child) for child in children]


def discover(roots, extensions, workers=DISCOVERY_WORKERS):
    """Find every candidate database under the given roots.

    The tree is walked one level at a time and every directory of a level is
    listed on the thread pool. The first failure aborts discovery.
    """
    extensions = normalize_extensions(extensions)
    pending = []
    for root in roots:
        path = os.path.abspath(root)
        if not os.path.exists(path):
            raise NotFoundError(f"Source path {path} does not exist")
        pending.append(path)

    dbs = []
    seen = set()
    with ThreadPoolExecutor(max_workers=workers) as executor:
        while pending:
            directories = []
            for path in pending:
                kind, ext = classify_path(path)
                if kind == DIRECTORY:
                    directories.append(path)
                elif kind == CANDIDATE and ext in extensions and path not in seen:
                    seen.add(path)
                    dbs.append(path)
            pending = [child for children in executor.map(list_directory, directories) for child in children]
    return dbs
