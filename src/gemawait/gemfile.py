r"""Read the identifier of a package from a ``.gem`` archive.

A ``.gem`` file is a tar archive holding ``metadata.gz``, the gzipped YAML
dump of the gem specification. The specification is a tree of Ruby
objects (``!ruby/object:Gem::Specification``, ``!ruby/object:Gem::Version``,
...) which are loaded here as plain mappings.
"""

from __future__ import annotations

__all__ = ["read_name_tuple"]

import gzip
import tarfile
from typing import TYPE_CHECKING, Any

import yaml

from gemawait.exceptions import InvalidIdentifierError

if TYPE_CHECKING:
    from pathlib import Path

METADATA_MEMBER = "metadata.gz"


class _SpecificationLoader(yaml.SafeLoader):
    """Safe YAML loader accepting the Ruby object tags of gem specifications."""


def _construct_ruby_object(loader: _SpecificationLoader, tag_suffix: str, node: yaml.Node) -> Any:
    if isinstance(node, yaml.MappingNode):
        return loader.construct_mapping(node, deep=True)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node, deep=True)
    return loader.construct_scalar(node)


_SpecificationLoader.add_multi_constructor("!", _construct_ruby_object)


def _platform(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    # Gem::Platform objects are dumped as their cpu, os and version fields
    return "-".join(str(value[key]) for key in ("cpu", "os", "version") if value.get(key))


def read_name_tuple(path: Path | str) -> tuple[str, str, str | None]:
    """Read the ``(name, version, platform)`` of a gem archive.

    Args:
        path: The path of the ``.gem`` file.

    Returns:
        The name, the version and the platform of the packaged gem. The
        platform is returned as written in the specification (usually
        ``"ruby"``).

    Raises:
        InvalidIdentifierError: If the archive or its metadata cannot be
            read.
    """
    try:
        with tarfile.open(path) as archive:
            member = archive.extractfile(METADATA_MEMBER)
            if member is None:
                msg = f"{METADATA_MEMBER} is not a file"
                raise KeyError(msg)
            metadata = gzip.decompress(member.read())
        specification = yaml.load(metadata, Loader=_SpecificationLoader)  # noqa: S506
        version = specification["version"]
        if isinstance(version, dict):
            version = version["version"]
        return (str(specification["name"]), str(version), _platform(specification.get("platform")))
    except (OSError, EOFError, AttributeError, KeyError, TypeError, tarfile.TarError, yaml.YAMLError) as exc:
        msg = f"Cannot read gem file {str(path)!r}: {exc}"
        raise InvalidIdentifierError(msg) from exc
