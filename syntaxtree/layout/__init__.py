"""Layout: syntax tree -> positioned drawables; arrow routing and label placement; HTML debug preview."""
from .drawable import (
    Drawable,
    TextMeasurer,
    NODE_PADDING,
    layout,
    drawable_from_node,
    calculate_drawable_positions,
    calculate_auto_subscript,
    move_leaves_to_bottom,
    move_parents_down,
    get_max_depth,
    find_target,
    label_lines,
    case_text,
    feature_text,
    parse_feature,
)
from .arrows import (
    Arrow,
    ArrowSet,
    FeatureArrow,
    LabelPlacement,
    bezier_point,
    route,
    place_labels,
    route_feature_arrows,
)
from .debug import write_layout_preview_html

__all__ = [
    "Drawable",
    "TextMeasurer",
    "NODE_PADDING",
    "layout",
    "drawable_from_node",
    "calculate_drawable_positions",
    "calculate_auto_subscript",
    "move_leaves_to_bottom",
    "move_parents_down",
    "get_max_depth",
    "find_target",
    "label_lines",
    "case_text",
    "feature_text",
    "parse_feature",
    "Arrow",
    "ArrowSet",
    "FeatureArrow",
    "LabelPlacement",
    "bezier_point",
    "route",
    "place_labels",
    "route_feature_arrows",
    "write_layout_preview_html",
]
