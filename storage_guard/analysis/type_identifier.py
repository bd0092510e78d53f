"""
Decoding of solc type identifiers.

Type identifiers in the AST are encoded so that they don't contain
parentheses or commas, which are substituted as follows:

    (  ->  $_
    )  ->  _$
    ,  ->  _$_

This is not a prefix-free code, so a plain left-to-right replacement gets
runs like ``_$_$`` wrong. A token is only decoded when the run of tokens
following it ends in an ordinary character or at the end of the string.
"""

import re

from ..core.errors import TypeIdentifierDecodeError

_TOKEN = r"\$_|_\$_|_\$"

TYPE_IDENTIFIER_TOKEN = re.compile(rf"({_TOKEN})(?=(?:{_TOKEN})*(?:[^_$]|\Z))")

SUBSTITUTIONS = {
    "$_": "(",
    "_$": ")",
    "_$_": ",",
}


def _substitute(match: "re.Match[str]") -> str:
    token = match.group(1)
    try:
        return SUBSTITUTIONS[token]
    except KeyError:
        raise TypeIdentifierDecodeError(f"Unreachable: unknown type identifier token {token!r}")


def decode_type_identifier(type_identifier: str) -> str:
    """
    Decode a solc type identifier into its canonical type key.

    >>> decode_type_identifier("t_mapping$_t_address_$_t_uint256_$")
    't_mapping(t_address,t_uint256)'

    Args:
        type_identifier: ``typeDescriptions.typeIdentifier`` of an AST node

    Returns:
        The identifier with parentheses and commas restored
    """
    return TYPE_IDENTIFIER_TOKEN.sub(_substitute, type_identifier)


def encode_type_identifier(type_key: str) -> str:
    """Inverse of ``decode_type_identifier`` for keys built by solc."""
    return type_key.replace(",", "_$_").replace("(", "$_").replace(")", "_$")
