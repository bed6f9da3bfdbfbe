from .registry import BlockEntry, BlockRegistry, DEFAULT_REGISTRY
from .html import link_button, render_block_frame, render_page, render_unknown_block
