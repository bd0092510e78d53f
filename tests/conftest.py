import json
import logging

import pytest
import structlog

from storage_guard.core.layout import StorageItem, StorageLayout, TypeItem

TOKEN_PATH = "contracts/Token.sol"

# Members of `contract Token is Base` in the first deployed version
TOKEN_V1_MEMBERS = [
    {
        "name": "DECIMALS",
        "typeIdentifier": "t_uint256",
        "typeString": "uint256",
        "declaration": "uint256 constant DECIMALS = 18;",
        "constant": True,
        "mutability": "constant",
    },
    {
        "name": "balances",
        "typeIdentifier": "t_mapping$_t_address_$_t_uint256_$",
        "typeString": "mapping(address => uint256)",
        "declaration": "mapping(address => uint256) balances;",
    },
    {
        "name": "created",
        "typeIdentifier": "t_uint256",
        "typeString": "uint256",
        "declaration": "uint256 immutable created;",
        "mutability": "immutable",
    },
]

TOTAL_SUPPLY = {
    "name": "totalSupply",
    "typeIdentifier": "t_uint256",
    "typeString": "uint256",
    "declaration": "uint256 totalSupply;",
}

NARROWED_BALANCES = {
    "name": "balances",
    "typeIdentifier": "t_mapping$_t_address_$_t_uint128_$",
    "typeString": "mapping(address => uint128)",
    "declaration": "mapping(address => uint128) balances;",
}


@pytest.fixture(autouse=True)
def reset_structlog():
    """Let every CLI run configure logging against the current capture streams."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


def var_decl(name, type_identifier, type_string, src="0:0:0", constant=False, mutability="mutable"):
    """Build a solc AST VariableDeclaration node."""
    return {
        "nodeType": "VariableDeclaration",
        "name": name,
        "constant": constant,
        "mutability": mutability,
        "stateVariable": True,
        "visibility": "internal",
        "src": src,
        "typeDescriptions": {
            "typeIdentifier": type_identifier,
            "typeString": type_string,
        },
    }


def build_info(token_members):
    """
    Build a Hardhat style build-info for Token.sol.

    Base declares `address owner;` on line 5; Token members start on line 9.
    """
    lines = [
        "// SPDX-License-Identifier: MIT",
        "pragma solidity ^0.8.0;",
        "",
        "contract Base {",
        "    address owner;",
        "}",
        "",
        "contract Token is Base {",
    ]
    lines += [f"    {member['declaration']}" for member in token_members]
    lines += ["}", ""]
    content = "\n".join(lines)

    def src(snippet):
        start = content.encode("utf-8").index(snippet.encode("utf-8"))
        return f"{start}:{len(snippet)}:0"

    base = {
        "nodeType": "ContractDefinition",
        "id": 1,
        "name": "Base",
        "linearizedBaseContracts": [1],
        "src": src("contract Base {"),
        "nodes": [var_decl("owner", "t_address", "address", src=src("address owner;"))],
    }
    token = {
        "nodeType": "ContractDefinition",
        "id": 2,
        "name": "Token",
        "linearizedBaseContracts": [2, 1],
        "src": src("contract Token is Base {"),
        "nodes": [
            var_decl(
                member["name"],
                member["typeIdentifier"],
                member["typeString"],
                src=src(member["declaration"]),
                constant=member.get("constant", False),
                mutability=member.get("mutability", "mutable"),
            )
            for member in token_members
        ],
    }

    return {
        "_format": "hh-sol-build-info-1",
        "id": "f3a1",
        "solcVersion": "0.8.20",
        "input": {
            "language": "Solidity",
            "sources": {TOKEN_PATH: {"content": content}},
            "settings": {},
        },
        "output": {
            "contracts": {},
            "sources": {
                TOKEN_PATH: {
                    "id": 0,
                    "ast": {
                        "nodeType": "SourceUnit",
                        "absolutePath": TOKEN_PATH,
                        "nodes": [
                            {"nodeType": "PragmaDirective", "literals": ["solidity", "^", "0.8", ".0"]},
                            base,
                            token,
                        ],
                    },
                }
            },
        },
    }


@pytest.fixture
def make_var_decl():
    return var_decl


@pytest.fixture
def token_build_info():
    return build_info(TOKEN_V1_MEMBERS)


@pytest.fixture
def token_versions():
    """Token members for the deployed version and two candidate upgrades."""
    return {
        "v1": list(TOKEN_V1_MEMBERS),
        "appended": TOKEN_V1_MEMBERS + [TOTAL_SUPPLY],
        "narrowed": [TOKEN_V1_MEMBERS[0], NARROWED_BALANCES, TOKEN_V1_MEMBERS[2]],
    }


@pytest.fixture
def write_build_info(tmp_path):
    """Write a build-info for the given Token members and return its path."""

    def write(token_members, name="build-info.json"):
        path = tmp_path / name
        path.write_text(json.dumps(build_info(token_members)))
        return str(path)

    return write


def make_layout(*fields, contract="Token"):
    """
    Build a StorageLayout from (label, type key, type label) tuples.

    Items get src "<contract>.sol:<line>" with line = 1-based position.
    """
    storage = []
    types = {}
    for line, (label, type_key, type_label) in enumerate(fields, 1):
        storage.append(StorageItem(contract=contract, label=label, type=type_key, src=f"{contract}.sol:{line}"))
        types[type_key] = TypeItem(label=type_label)
    return StorageLayout(storage=tuple(storage), types=types)


@pytest.fixture
def layout_factory():
    return make_layout
