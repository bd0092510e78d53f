from .log import configure_logging
from .src_decoder import solc_input_output_decoder, parse_src
from .solc_output import (
    load_build_info,
    is_build_info,
    iter_contract_definitions,
    find_contract_definition,
    extract_linearized_layout,
    layout_from_solc,
    layout_from_build_info,
)

__all__ = [
    "configure_logging",
    "solc_input_output_decoder",
    "parse_src",
    "load_build_info",
    "is_build_info",
    "iter_contract_definitions",
    "find_contract_definition",
    "extract_linearized_layout",
    "layout_from_solc",
    "layout_from_build_info",
]
