"""tl_bindgen - generate typed serde bindings from a wire schema."""

__version__ = "0.1.0"
