# The registry of layout strategy classes
LAYOUT_REGISTRY = {}

def register_layout(kind: str):
    def deco(cls):
        LAYOUT_REGISTRY[kind] = cls
        return cls
    return deco

def get_layout(kind: str):
    """Instantiate the layout strategy registered under ``kind``."""
    if kind not in LAYOUT_REGISTRY:
        raise KeyError(f"Unknown layout strategy '{kind}'. Available: {sorted(LAYOUT_REGISTRY)}")
    return LAYOUT_REGISTRY[kind]()
