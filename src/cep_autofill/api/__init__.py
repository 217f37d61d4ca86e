"""HTTP surface: CEP lookup and headless autofill."""
