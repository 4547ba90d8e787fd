from .process_invoker import ProcessInvoker

__all__ = ["ProcessInvoker"]
