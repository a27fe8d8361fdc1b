"""minibundle codegen - ES module syntax lowering."""

from minibundle.codegen.transform import TARGETS, ModuleTransformer, transform, validate_target

__all__ = ["transform", "validate_target", "ModuleTransformer", "TARGETS"]
