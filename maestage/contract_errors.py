from __future__ import annotations
import inspect

class ContractError(TypeError):
    pass

def _required_positional_params(fn) -> int:
    """
    Count required positional-or-keyword parameters on a *bound* method.
    ('self' is already bound and not counted.)
    """
    sig = inspect.signature(fn)
    count = 0
    for p in sig.parameters.values():
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY,
                      inspect.Parameter.POSITIONAL_OR_KEYWORD):
            if p.default is inspect.Parameter.empty:
                count += 1
    return count

def _accepts_positional(fn, n: int) -> bool:
    sig = inspect.signature(fn)
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in sig.parameters.values()):
        return True
    positional = [
        p for p in sig.parameters.values()
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    return len(positional) >= n

def ensure_methods(obj, *, require: dict[str, int]) -> None:
    """
    Ensure `obj` has each method in `require` and that each method can be
    called with the given number of positional arguments.

    Example: ensure_methods(provider, require={"acquire_metadata": 2})
    """
    cls = obj.__class__.__name__
    for name, n_args in require.items():
        fn = getattr(obj, name, None)
        if fn is None or not callable(fn):
            raise ContractError(f"{cls} is missing a callable method '{name}()'.")
        req = _required_positional_params(fn)
        if req > n_args or not _accepts_positional(fn, n_args):
            raise ContractError(
                f"{cls}.{name}() must accept {n_args} positional args "
                f"(it requires {req})."
            )
