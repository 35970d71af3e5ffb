"""Documentation model converter -- identifiers, parameter merging, projection.

The second half of the restdoc pipeline: turning a
:class:`~restdoc.models.ParsedDocument` into a
:class:`~restdoc.models.RootItem`.

Typical usage::

    from restdoc.converter import check_operation_ids, project

    check_operation_ids(document, "contacts.json")
    root = project(document, raw=text)

Sub-modules:

* :mod:`~restdoc.converter.identifiers` -- UID and HtmlId derivation.
* :mod:`~restdoc.converter.parameters` -- path/operation parameter override.
* :mod:`~restdoc.converter.projector` -- the model walk itself.
"""

from restdoc.converter.identifiers import (
    derive_html_id,
    derive_root_uid,
    derive_tag_html_id,
    derive_uid,
)
from restdoc.converter.parameters import resolve_parameters
from restdoc.converter.projector import check_operation_ids, project

__all__ = [
    "derive_html_id",
    "derive_root_uid",
    "derive_tag_html_id",
    "derive_uid",
    "resolve_parameters",
    "check_operation_ids",
    "project",
]
