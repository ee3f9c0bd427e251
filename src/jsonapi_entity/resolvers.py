"""
Unwrappers collapse a hydrated wrapper entity into the value it wraps.
They are looked up by ``(entity, bundle)`` of the reference being resolved.
"""
import typing

from .models import Unwrapper

if typing.TYPE_CHECKING:  # pragma: nocover
    from .entity import SingleEntity


async def unwrap_library_paragraph(wrapper: "SingleEntity") -> typing.Any:
    """
    A ``paragraph--from_library`` entity only points at a reusable library item,
    which in turn holds the paragraphs; return those paragraphs.
    """
    library_item = await wrapper.value("field_reusable_paragraph")
    return await library_item.value("paragraphs")


DEFAULT_UNWRAPPERS: typing.Mapping[typing.Tuple[str, str], Unwrapper] = {
    ("paragraph", "from_library"): unwrap_library_paragraph,
}
