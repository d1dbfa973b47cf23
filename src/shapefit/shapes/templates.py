"""
Puzzle template library.

Fixed silhouettes for the template-based tiers. Offsets are relative to the
template centre and locate each shape's anchor (bounding-box centre, or
centroid for triangles). Equilateral triangles (height 87) sit 29px from
their base and 58px from their apex; isosceles triangles (height 100) sit
33.33px from their base and 66.67px from their apex. Every layout is packed so
neighbouring shapes share an edge without overlapping.
"""

from typing import Iterable, List, Optional, Tuple, TYPE_CHECKING

from shapefit.core.base import Rotation, ShapeType, TemplateLayout, TemplateShape
if TYPE_CHECKING:
    from shapefit.core.config import DifficultyConfig
    from shapefit.puzzle.random_source import RandomSource

SQ = ShapeType.SQUARE
RECT = ShapeType.RECTANGLE
PARA = ShapeType.PARALLELOGRAM
EQ = ShapeType.EQUILATERAL_TRIANGLE
ISO = ShapeType.ISOSCELES_TRIANGLE

R0 = Rotation.DEG_0
R90 = Rotation.DEG_90
R180 = Rotation.DEG_180
R270 = Rotation.DEG_270


# House
#      /\
#     /  \
#    |    |
#   [------]
#    /____/
HOUSE = TemplateLayout(
    name="house",
    shapes=(
        TemplateShape(EQ, 0, -109, R0),     # roof
        TemplateShape(SQ, 0, -30, R0),      # walls
        TemplateShape(RECT, 0, 55, R0),     # porch
        TemplateShape(PARA, 0, 130, R0),    # path
    ),
)

# Tree
#      /\
#   [------]
#     |  |
#     /__/
TREE = TemplateLayout(
    name="tree",
    shapes=(
        TemplateShape(EQ, 0, -104, R0),     # crown
        TemplateShape(RECT, 0, -40, R0),    # foliage
        TemplateShape(SQ, 0, 45, R0),       # trunk
        TemplateShape(PARA, 0, 135, R0),    # ground
    ),
)

# Boat
#     /\
#    |  |[----]
#   /__________/
BOAT = TemplateLayout(
    name="boat",
    shapes=(
        TemplateShape(PARA, -65, 90, R0),   # hull
        TemplateShape(SQ, -55, 0, R0),      # cabin
        TemplateShape(EQ, -55, -79, R0),    # sail
        TemplateShape(RECT, 65, 15, R0),    # deck house
    ),
)

# Train
#          /\
#   [----]|  |
#    /___/
TRAIN = TemplateLayout(
    name="train",
    shapes=(
        TemplateShape(RECT, -50, 0, R0),    # carriage
        TemplateShape(SQ, 70, -15, R0),     # cab
        TemplateShape(EQ, 70, -94, R0),     # funnel
        TemplateShape(PARA, -50, 75, R0),   # chassis
    ),
)

# Rocket
#       /\
#      |  |
#    <|    |>
#     [    ]
ROCKET = TemplateLayout(
    name="rocket",
    shapes=(
        TemplateShape(ISO, 0, -103.33, R0),  # nose
        TemplateShape(RECT, 0, 0, R90),      # body, stood upright
        TemplateShape(EQ, -64, 20, R270),    # left fin
        TemplateShape(EQ, 64, 20, R90),      # right fin
        TemplateShape(SQ, 0, 120, R0),       # engine
    ),
)

# Turtle
#        /\
#     <|[  ]|>
#        \/
TURTLE = TemplateLayout(
    name="turtle",
    shapes=(
        TemplateShape(SQ, 0, 0, R0),          # shell
        TemplateShape(ISO, 0, -83.33, R0),    # head
        TemplateShape(EQ, -79, 0, R270),      # left leg
        TemplateShape(EQ, 79, 0, R90),        # right leg
        TemplateShape(EQ, 0, 79, R180),       # tail
    ),
)

# Fish
#        /\
#   <|[------]|>
#        \/
FISH = TemplateLayout(
    name="fish",
    shapes=(
        TemplateShape(RECT, 0, 0, R0),         # body
        TemplateShape(ISO, 103.33, 0, R90),    # nose
        TemplateShape(EQ, -99, 0, R270),       # tail
        TemplateShape(EQ, 0, -64, R0),         # dorsal fin
        TemplateShape(EQ, 0, 64, R180),        # belly fin
    ),
)

# Castle
#   [ ]  /\  [ ]
#   [ ] [  ] [ ]
#      /___/
CASTLE = TemplateLayout(
    name="castle",
    shapes=(
        TemplateShape(SQ, 0, 0, R0),           # keep
        TemplateShape(RECT, -85, -20, R90),    # left tower
        TemplateShape(RECT, 85, -20, R90),     # right tower
        TemplateShape(ISO, 0, -83.33, R0),     # spire
        TemplateShape(PARA, 0, 90, R0),        # drawbridge
    ),
)

# Arrow
#   [  ][----]|>
ARROW = TemplateLayout(
    name="arrow",
    shapes=(
        TemplateShape(SQ, -120, 0, R0),        # fletching
        TemplateShape(RECT, 0, 0, R0),         # shaft
        TemplateShape(EQ, 99, 0, R90),         # head
    ),
)

PUZZLE_TEMPLATES: Tuple[TemplateLayout, ...] = (
    HOUSE,
    TREE,
    BOAT,
    TRAIN,
    ROCKET,
    TURTLE,
    FISH,
    CASTLE,
    ARROW,
)


def get_template(name: str) -> TemplateLayout:
    """Look up a template by name."""
    for template in PUZZLE_TEMPLATES:
        if template.name == name:
            return template
    raise KeyError(f"Unknown template '{name}'")


def random_template(rng: "RandomSource") -> TemplateLayout:
    """Pick any template uniformly at random."""
    return rng.choice(PUZZLE_TEMPLATES)


def templates_for(shape_count: int, available_shapes: Iterable[ShapeType]) -> List[TemplateLayout]:
    """Templates with exactly ``shape_count`` shapes, all of allowed types."""
    allowed = set(available_shapes)
    return [
        t for t in PUZZLE_TEMPLATES
        if len(t.shapes) == shape_count and set(t.shape_types) <= allowed
    ]


def random_template_for(config: "DifficultyConfig", rng: "RandomSource") -> TemplateLayout:
    """
    Pick uniformly among the templates a difficulty tier can use.

    Raises:
        ValueError: If no template fits the tier's shape count and types
    """
    candidates = templates_for(config.shape_count, config.available_shapes)
    if not candidates:
        raise ValueError(
            f"No template has {config.shape_count} shapes drawn from "
            f"{[s.value for s in config.available_shapes]}"
        )
    return rng.choice(candidates)


def describe_templates(templates: Optional[Iterable[TemplateLayout]] = None) -> List[dict]:
    """Summary rows for listing templates."""
    rows = []
    for t in templates if templates is not None else PUZZLE_TEMPLATES:
        rows.append({
            "name": t.name,
            "shape_count": len(t.shapes),
            "types": [s.type.value for s in t.shapes],
            "rotated": any(s.rotation != R0 for s in t.shapes),
        })
    return rows
