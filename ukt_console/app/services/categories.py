"""UKT category definitions screen."""

from ukt_console.app.client.resources import UKT_CATEGORIES
from ukt_console.app.services.controller import ResourceController
from ukt_console.app.services.formatting import Column, format_currency
from ukt_console.app.services.forms import FieldKind, FieldSpec


class CategoriesController(ResourceController):
    endpoint = UKT_CATEGORIES
    fields = (
        FieldSpec("nama_kategori", required=True),
        FieldSpec("nominal", FieldKind.NUMBER, required=True),
    )
    search_fields = ("nama_kategori",)
    columns = (
        Column("id_kategori_ukt", "ID"),
        Column("nama_kategori", "Nama Kategori"),
        Column("nominal", "Nominal", lambda row: format_currency(row.nominal)),
    )
