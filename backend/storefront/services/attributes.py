"""Predefined furniture attribute vocabulary and the editor's selection state."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from storefront.api.schemas.attribute import AttributeOption, AttributePair


def _option(id: str, name: str, category: str, values: Iterable[str]) -> AttributeOption:
    return AttributeOption(id=id, name=name, values=tuple(values), category=category)


PREDEFINED_ATTRIBUTES: tuple[AttributeOption, ...] = (
    # Muebles
    _option(
        "tipo_mueble",
        "Tipo de Mueble",
        "muebles",
        [
            "Sofá", "Silla", "Mesa", "Cama", "Armario", "Estantería", "Escritorio",
            "Comoda", "Mesa de centro", "Mesa de comedor", "Silla de comedor",
            "Sofá cama", "Futón", "Puff", "Banco",
        ],
    ),
    _option(
        "material",
        "Material",
        "muebles",
        [
            "Madera", "Metal", "Plástico", "Vidrio", "Mármol", "Granito", "Cuero",
            "Tela", "Rattan", "Bambú", "Mimbre", "Aluminio", "Acero", "Poliéster",
        ],
    ),
    _option(
        "color",
        "Color",
        "muebles",
        [
            "Natural", "Blanco", "Negro", "Marrón", "Gris", "Beige", "Rojo", "Azul",
            "Verde", "Amarillo", "Rosa", "Morado", "Naranja", "Multicolor",
        ],
    ),
    _option(
        "estilo",
        "Estilo",
        "muebles",
        [
            "Moderno", "Clásico", "Vintage", "Rústico", "Minimalista", "Industrial",
            "Escandinavo", "Mediterráneo", "Tropical", "Art Deco", "Shabby Chic", "Boho",
        ],
    ),
    _option(
        "habitacion",
        "Habitación",
        "muebles",
        [
            "Sala", "Comedor", "Dormitorio", "Cocina", "Baño", "Oficina", "Terraza",
            "Jardín", "Entrada", "Pasillo", "Estudio", "Sótano",
        ],
    ),
    # Decoración
    _option(
        "tipo_decoracion",
        "Tipo",
        "decoracion",
        [
            "Lámpara", "Espejo", "Cuadro", "Jarrón", "Cojín", "Alfombra", "Cortina",
            "Mantel", "Centro de mesa", "Portavelas", "Reloj", "Maceta", "Cesta",
        ],
    ),
    _option("tamaño", "Tamaño", "decoracion", ["Pequeño", "Mediano", "Grande", "Extra Grande"]),
    # Cocina
    _option(
        "tipo_cocina",
        "Tipo",
        "cocina",
        [
            "Vajilla", "Cubiertos", "Ollas", "Sartenes", "Electrodomésticos",
            "Utensilios", "Organizadores", "Accesorios",
        ],
    ),
    _option(
        "material_cocina",
        "Material",
        "cocina",
        [
            "Acero inoxidable", "Cerámica", "Vidrio", "Plástico", "Silicón", "Madera",
            "Bambú", "Aluminio", "Hierro fundido",
        ],
    ),
    # Baño
    _option(
        "tipo_bano",
        "Tipo",
        "bano",
        [
            "Toallas", "Alfombras", "Accesorios", "Organizadores", "Cortinas",
            "Jaboneras", "Porta rollos", "Estantes",
        ],
    ),
    _option(
        "material_bano",
        "Material",
        "bano",
        [
            "Algodón", "Microfibra", "Bambú", "Plástico", "Acero inoxidable",
            "Cerámica", "Vidrio", "Madera",
        ],
    ),
    # Jardín
    _option(
        "tipo_jardin",
        "Tipo",
        "jardin",
        [
            "Macetas", "Muebles de jardín", "Iluminación", "Decoración",
            "Herramientas", "Accesorios",
        ],
    ),
    _option(
        "resistencia",
        "Resistencia",
        "jardin",
        [
            "Interior", "Exterior", "Resistente al agua", "Resistente a UV",
            "Resistente a la intemperie",
        ],
    ),
    # Iluminación
    _option(
        "tipo_iluminacion",
        "Tipo",
        "iluminacion",
        [
            "Lámpara de techo", "Lámpara de mesa", "Lámpara de pie", "Lámpara de pared",
            "Lámpara colgante", "Lámpara de escritorio", "Lámpara de noche",
        ],
    ),
    _option(
        "tipo_bombilla",
        "Tipo de Bombilla",
        "iluminacion",
        ["LED", "Incandescente", "Fluorescente", "Halógena", "Smart LED"],
    ),
    # Textiles
    _option(
        "tipo_textil",
        "Tipo",
        "textiles",
        [
            "Cortinas", "Alfombras", "Manteles", "Servilletas", "Cojines", "Fundas",
            "Colchas", "Sábanas", "Toallas",
        ],
    ),
    _option(
        "material_textil",
        "Material",
        "textiles",
        [
            "Algodón", "Lino", "Seda", "Lana", "Poliéster", "Microfibra", "Bambú",
            "Yute", "Lurex",
        ],
    ),
)

PREDEFINED_NAMES = frozenset(option.name for option in PREDEFINED_ATTRIBUTES)


def by_category(category: str | None = None) -> list[AttributeOption]:
    """All options, or only those tagged with ``category``."""
    if not category:
        return list(PREDEFINED_ATTRIBUTES)
    return [option for option in PREDEFINED_ATTRIBUTES if option.category == category]


def categories() -> list[str]:
    """Distinct option categories in first-seen order."""
    seen: dict[str, None] = {}
    for option in PREDEFINED_ATTRIBUTES:
        if option.category:
            seen.setdefault(option.category, None)
    return list(seen)


def find_option(attribute_id: str) -> AttributeOption | None:
    for option in PREDEFINED_ATTRIBUTES:
        if option.id == attribute_id:
            return option
    return None


class AttributeSelection:
    """Attributes being assembled while a product or variant form is open.

    Predefined picks and free-text pairs are kept in separate lists;
    ``all`` concatenates them (selected first) and is what gets sent
    to the backend.
    """

    def __init__(
        self,
        selected: Iterable[AttributePair] | None = None,
        custom: Iterable[AttributePair] | None = None,
    ) -> None:
        self.selected: list[AttributePair] = list(selected or [])
        self.custom: list[AttributePair] = list(custom or [])

    @property
    def all(self) -> list[AttributePair]:
        return [*self.selected, *self.custom]

    def add_predefined(self, attribute_id: str, value: str) -> bool:
        """Append a predefined attribute; unknown ids are ignored."""
        option = find_option(attribute_id)
        if option is None:
            return False
        self.selected.append(AttributePair(name=option.name, value=value))
        return True

    def add_custom(self, name: str, value: str) -> None:
        self.custom.append(AttributePair(name=name, value=value))

    def remove(self, name: str, value: str) -> None:
        """Drop every entry matching the exact name/value pair from both lists."""

        def keep(pair: AttributePair) -> bool:
            return not (pair.name == name and pair.value == value)

        self.selected = [pair for pair in self.selected if keep(pair)]
        self.custom = [pair for pair in self.custom if keep(pair)]

    def clear(self) -> None:
        self.selected = []
        self.custom = []

    def load_existing(self, attributes: Mapping[str, Any] | None) -> None:
        """Split a stored ``{name: value}`` map into predefined and custom entries."""
        pairs = [
            AttributePair(name=str(name), value="" if value is None else str(value))
            for name, value in (attributes or {}).items()
        ]
        self.selected = [pair for pair in pairs if pair.name in PREDEFINED_NAMES]
        self.custom = [pair for pair in pairs if pair.name not in PREDEFINED_NAMES]

    def to_backend_format(self) -> dict[str, str]:
        """Fold ``all`` into a name-keyed map; a later duplicate name overwrites an earlier one."""
        result: dict[str, str] = {}
        for pair in self.all:
            result[pair.name] = pair.value
        return result
