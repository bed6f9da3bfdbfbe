from .schemas import Block, BlockType, ProductRecord, RenderedBlock, SiteContext, BLOCK_TYPES
from .style import (
    DeviceStyle, ResolvedStyle, STYLE_PRESETS,
    apply_style_preset, effective_tokens, frame_css, merge_style, resolve_style,
)
from .design_system import DEFAULT_TOKENS, STYLE_TABLE, STYLE_TOKENS, generate_css_variables
