"""Human-readable byte sizes ("5G", "512MiB", "1.5 GB")."""

from pydantic import ByteSize, TypeAdapter, ValidationError

_byte_size = TypeAdapter(ByteSize)


def parse_size(value: str) -> int:
    """
    Parse a size string into bytes.

    Decimal suffixes (k, M, G, T / kB, MB, ...) are powers of 1000 and
    binary suffixes (KiB, MiB, GiB, ...) powers of 1024, like ccache's own
    max_size setting. A bare number is bytes.

    Raises:
        ValueError: if value is not a valid size
    """
    try:
        return int(_byte_size.validate_python(value.strip()))
    except ValidationError as e:
        raise ValueError(f"Invalid size: {value!r}") from e
