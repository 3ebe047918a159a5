from pathlib import Path
from typing import Any, overload

import yaml
from pydantic import TypeAdapter, ValidationError

# -------------------------------
# Raw YAML
# -------------------------------


def _read_yaml_raw(path: Path | str) -> Any:
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"File not found: {p}")

    try:
        with open(p, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except UnicodeDecodeError as e:
        raise ValueError(f"{p} is not UTF-8: {e}") from e
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {p}: {e}") from e

    if data is None:
        raise ValueError(f"Empty YAML file: {p}")
    return data


# -------------------------------
# Typed loading
# -------------------------------


@overload
def load_yaml_typed[T](path: Path | str, *, adapter: TypeAdapter[T]) -> T: ...


@overload
def load_yaml_typed[T](path: Path | str, *, model: type[T]) -> T: ...


def load_yaml_typed[T](
    path: Path | str,
    *,
    adapter: TypeAdapter[T] | None = None,
    model: type[T] | None = None,
) -> T:
    """Parse a YAML file into ``model`` (or through ``adapter``) with pydantic.

    Pass exactly one of the two, e.g.::

        load_yaml_typed("fabric.yaml", model=TopologyConfig)
        load_yaml_typed("devices.yaml", adapter=DeviceListAdapter)

    Validation errors are re-raised as ``ValueError`` naming the file.
    """
    if (adapter is None) == (model is None):
        raise ValueError("Provide exactly one of 'adapter' or 'model'.")

    validator = adapter if adapter is not None else TypeAdapter(model)
    data = _read_yaml_raw(path)
    try:
        return validator.validate_python(data)
    except ValidationError as e:
        raise ValueError(f"Invalid structure in {path}: {e}") from e


def load_yaml_list[U](path: Path | str, item_model: type[U]) -> list[U]:
    """A YAML sequence of ``item_model`` records."""
    return load_yaml_typed(path, adapter=TypeAdapter(list[item_model]))  # type: ignore[valid-type]


def dump_yaml(data: Any, path: Path | str) -> Path:
    """Write plain data as block-style YAML, creating parent directories."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return p
