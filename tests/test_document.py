import logging
from pathlib import Path

import pytest

from rpc_describe.config import GeneratorConfig
from rpc_describe.docs.resolver import DocumentationResolver, load_documentation
from rpc_describe.errors import RegistrationError
from rpc_describe.generator.document import DocumentAssembler, describe
from rpc_describe.registry.base import MethodEntry, RegistrySnapshot
from rpc_describe.registry.loader import load_registry
from rpc_describe.schema.base import COMPONENTS_PREFIX
from rpc_describe.schema.reflector import INTEGER_SCHEMA

FIXTURES = Path(__file__).parent / "fixtures"


def _math_snapshot() -> RegistrySnapshot:
    return RegistrySnapshot(
        namespaces={
            "math": [
                MethodEntry(
                    name="add",
                    params=["bigint", "bigint"],
                    param_names=["a", "b"],
                    results=["bigint", "error"],
                )
            ]
        }
    )


class TestDescribe:
    def test_math_add_end_to_end(self):
        doc = describe(_math_snapshot())
        assert doc.method_names() == ["math_add"]

        method = doc.find_method("math_add")
        assert [p.name for p in method.params] == ["a", "b"]
        assert method.result.name == "math_addResult"

        refs = {p.schema_.ref for p in method.params} | {method.result.schema_.ref}
        assert len(refs) == 1
        key = refs.pop()[len(COMPONENTS_PREFIX):]
        assert doc.components.schemas[key].to_dict() == INTEGER_SCHEMA
        assert len(doc.components.schemas) == 1

    def test_serialized_shape(self):
        data = describe(_math_snapshot()).to_dict()
        assert data["openrpc"] == "1.2.4"
        assert data["info"]["title"] == "Ethereum JSON-RPC"
        assert data["externalDocs"]["url"] == "https://github.com/etclabscore/core-geth"
        method = data["methods"][0]
        assert method["paramStructure"] == "by-position"
        assert method["params"][0] == {"name": "a", "schema": {"$ref": method["result"]["schema"]["$ref"]}}

    def test_custom_separator(self):
        doc = describe(_math_snapshot(), config=GeneratorConfig(separator="."))
        assert doc.method_names() == ["math.add"]

    def test_builds_do_not_share_state(self):
        first = describe(_math_snapshot())
        second = describe(RegistrySnapshot(namespaces={"net": [MethodEntry(name="listening", results=["bool"])]}))
        assert first.components.schemas.keys().isdisjoint(second.components.schemas.keys())
        assert second.method_names() == ["net_listening"]


class TestAssemblerFiltering:
    def test_reserved_namespace_is_skipped(self):
        snapshot = RegistrySnapshot(namespaces={"rpc": [MethodEntry(name="modules")], "net": [MethodEntry(name="version")]})
        assert describe(snapshot).method_names() == ["net_version"]

    def test_subscription_flag_is_skipped(self):
        snapshot = RegistrySnapshot(namespaces={"eth": [MethodEntry(name="newHeads", subscription=True)]})
        assert describe(snapshot).methods == []

    def test_subscribe_suffix_is_skipped(self):
        snapshot = RegistrySnapshot(
            namespaces={"eth": [MethodEntry(name="subscribe"), MethodEntry(name="unsubscribe")]}
        )
        assert describe(snapshot).method_names() == ["eth_unsubscribe"]

    def test_configured_suffix(self):
        snapshot = RegistrySnapshot(namespaces={"eth": [MethodEntry(name="watch"), MethodEntry(name="call")]})
        doc = describe(snapshot, config=GeneratorConfig(subscribe_suffix="_watch"))
        assert doc.method_names() == ["eth_call"]

    def test_first_registration_wins(self):
        snapshot = RegistrySnapshot(
            namespaces={
                "admin": [
                    MethodEntry(name="datadir", results=["string"]),
                    MethodEntry(name="datadir", results=["bigint", "error"]),
                ]
            }
        )
        doc = describe(snapshot)
        assert doc.method_names() == ["admin_datadir"]
        assert doc.methods[0].result.name == "admin_datadirResult"
        key = doc.methods[0].result.schema_.ref[len(COMPONENTS_PREFIX):]
        assert doc.components.schemas[key].type == "string"

    def test_duplicate_dropped_before_build(self):
        # An unrepresentable second registration never reaches the builder
        snapshot = RegistrySnapshot(
            namespaces={
                "admin": [
                    MethodEntry(name="datadir", results=["string"]),
                    MethodEntry(name="datadir", params=["function"]),
                ]
            }
        )
        assert describe(snapshot).method_names() == ["admin_datadir"]

    def test_duplicate_across_namespaces(self, caplog):
        # "a_b" + "c" and "a" + "b_c" both qualify to "a_b_c"
        snapshot = RegistrySnapshot(
            namespaces={
                "a_b": [MethodEntry(name="c", results=["string"])],
                "a": [MethodEntry(name="b_c", results=["bigint"])],
            }
        )
        with caplog.at_level(logging.DEBUG, logger="rpc_describe.generator.document"):
            doc = describe(snapshot)

        assert doc.method_names() == ["a_b_c"]
        key = doc.methods[0].result.schema_.ref[len(COMPONENTS_PREFIX):]
        assert doc.components.schemas[key].type == "string"
        assert "dropping duplicate registration of a_b_c from a" in caplog.text

    def test_methods_are_sorted(self):
        snapshot = RegistrySnapshot(
            namespaces={
                "web3": [MethodEntry(name="sha3", params=["bytes"], results=["hash"])],
                "eth": [MethodEntry(name="syncing"), MethodEntry(name="accounts", results=[{"kind": "list", "element": "address"}])],
            }
        )
        assert describe(snapshot).method_names() == ["eth_accounts", "eth_syncing", "web3_sha3"]


class TestAssemblerFailures:
    def test_registration_error_aborts_build(self):
        snapshot = RegistrySnapshot(
            namespaces={
                "eth": [
                    MethodEntry(name="blockNumber", results=["bigint"]),
                    MethodEntry(name="feed", params=["channel"]),
                ]
            }
        )
        with pytest.raises(RegistrationError) as exc:
            describe(snapshot)
        assert exc.value.method == "eth_feed"
        assert exc.value.position == "parameter 0"

    def test_builder_and_deduplicator_are_injectable(self):
        builder = DocumentAssembler().builder
        assembler = DocumentAssembler(builder=builder)
        doc = assembler.assemble(_math_snapshot(), DocumentationResolver())
        assert doc.method_names() == ["math_add"]


class TestFixtureRegistry:
    def test_full_registry(self):
        snapshot = load_registry(FIXTURES / "registry.yaml")
        doc = describe(snapshot, docs=load_documentation(FIXTURES / "docs.yaml"))

        assert doc.method_names() == [
            "admin_datadir",
            "admin_peers",
            "eth_blockNumber",
            "eth_getBalance",
            "eth_getBlockByHash",
            "net_listening",
            "net_version",
        ]

    def test_docs_are_attached(self):
        snapshot = load_registry(FIXTURES / "registry.yaml")
        doc = describe(snapshot, docs=load_documentation(FIXTURES / "docs.yaml"))

        datadir = doc.find_method("admin_datadir")
        assert datadir.summary == "Retrieves the current data directory the node is using."

        balance = doc.find_method("eth_getBalance")
        assert [p.name for p in balance.params] == ["address", "blockNrOrHash"]
        assert balance.params[0].summary == "The account to query"
        assert balance.result.summary == "Balance in wei"
        assert balance.external_docs.url == "file://internal/ethapi/api.go:612"

        version = doc.find_method("net_version")
        assert version.description == "The version is the network id the node was started with."

    def test_named_type_key_carries_type_name(self):
        snapshot = load_registry(FIXTURES / "registry.yaml")
        doc = describe(snapshot)
        ref = doc.find_method("eth_getBlockByHash").params[0].schema_.ref
        assert ref.startswith(COMPONENTS_PREFIX + "Hash_string.keccak.")

    def test_every_reference_resolves(self):
        doc = describe(load_registry(FIXTURES / "registry.yaml"))
        data = doc.to_dict()
        schemas = data["components"]["schemas"]
        for method in data["methods"]:
            for descriptor in [*method["params"], method["result"]]:
                assert descriptor["schema"]["$ref"][len(COMPONENTS_PREFIX):] in schemas
