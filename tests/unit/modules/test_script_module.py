"""
Tests for the default host module model and the registered code loaders.
"""

import pytest
import torch
from torch import nn

from jit_import.modules import (
    ModuleFactory,
    RawCodeLoader,
    ScriptModule,
    SourceCodeLoader,
    TreeModuleFactory,
)
from jit_import.utils.registry import CODE_LOADER_REGISTRY, Registry


class TestScriptModule:
    def test_register_parameter_wraps_and_shares_storage(self):
        module = ScriptModule()
        t = torch.arange(4, dtype=torch.float32).requires_grad_()
        module.register_parameter("weight", t, False)

        (name, param), = module.named_parameters()
        assert name == "weight"
        assert isinstance(param, nn.Parameter)
        assert param.requires_grad
        assert param.untyped_storage().data_ptr() == t.untyped_storage().data_ptr()

    def test_register_parameter_returns_bound_object(self):
        module = ScriptModule()
        t = torch.zeros(2)
        param = module.register_parameter("weight", t)
        assert param is module.weight
        assert module.register_parameter("stat", t, is_buffer=True) is t

    @pytest.mark.parametrize("name", ["code", "code_arena", "optimized"])
    def test_import_state_does_not_shadow_names(self, name):
        module = ScriptModule()
        module.register_parameter(name, torch.ones(1))
        module.set_optimized(True)
        assert isinstance(getattr(module, name), nn.Parameter)
        assert module.is_optimized() is True
        assert module.get_code() is None

    def test_register_frozen_parameter(self):
        module = ScriptModule()
        module.register_parameter("steps", torch.zeros(2, dtype=torch.int64))
        assert module.steps.requires_grad is False

    def test_register_buffer(self):
        module = ScriptModule()
        t = torch.zeros(3)
        module.register_parameter("running_mean", t, is_buffer=True)
        assert dict(module.named_buffers())["running_mean"] is t
        assert list(module.parameters()) == []

    def test_attribute_assignment_still_registers(self):
        module = ScriptModule()
        module.bias = nn.Parameter(torch.ones(2))
        assert "bias" in dict(module.named_parameters())

    def test_set_optimized(self):
        module = ScriptModule()
        assert module.is_optimized() is False
        module.set_optimized(True)
        assert module.is_optimized() is True


class TestTreeModuleFactory:
    def test_root_at_empty_path(self):
        factory = TreeModuleFactory()
        assert factory.get_or_create(()) is factory.root

    def test_create_if_absent_is_idempotent(self):
        factory = TreeModuleFactory()
        leaf = factory(("encoder", "proj"))
        assert factory(("encoder", "proj")) is leaf
        assert factory.root.find_module("encoder").find_module("proj") is leaf

    def test_children_keep_creation_order(self):
        factory = TreeModuleFactory()
        for name in ("b", "a", "c"):
            factory((name,))
        assert [n for n, _ in factory.root.named_children()] == ["b", "a", "c"]

    def test_existing_root(self):
        root = ScriptModule()
        assert TreeModuleFactory(root).get_or_create([]) is root

    def test_satisfies_factory_protocol(self):
        assert isinstance(TreeModuleFactory(), ModuleFactory)


class TestCodeLoaders:
    def test_source_loader(self):
        module = ScriptModule()
        SourceCodeLoader()(module, "def forward(self, x):\n    return x\n".encode(), [])
        assert module.get_code().startswith("def forward")

    def test_source_loader_rejects_binary(self):
        with pytest.raises(ValueError, match="UTF-8"):
            SourceCodeLoader()(ScriptModule(), b"\xff\xfe\x00", [])

    def test_raw_loader(self):
        module = ScriptModule()
        RawCodeLoader()(module, b"\x00\x01", [])
        assert module.get_code_arena() == b"\x00\x01"
        assert module.get_code() is None

    def test_registered_names(self):
        assert CODE_LOADER_REGISTRY.get("source") is SourceCodeLoader
        assert CODE_LOADER_REGISTRY.get("raw") is RawCodeLoader
        assert {"raw", "source"} <= set(CODE_LOADER_REGISTRY.list_available())

    def test_unknown_loader(self):
        with pytest.raises(ValueError, match="Unknown component 'pickle'"):
            CODE_LOADER_REGISTRY.get("pickle")


class TestRegistry:
    def test_register_and_get(self):
        registry = Registry("Test")

        @registry.register()
        class Widget:
            pass

        @registry.register("gadget")
        class Other:
            pass

        assert registry.get("Widget") is Widget
        assert registry.get("gadget") is Other
        assert registry.list_available() == ["Widget", "gadget"]
        assert registry.registry == {"Widget": Widget, "gadget": Other}
