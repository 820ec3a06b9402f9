"""Reference evaluator for the Culebra scripting language."""
