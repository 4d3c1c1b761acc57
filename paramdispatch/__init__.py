# paramdispatch
# Hierarchical parameter distribution

"""
Core invariant: a submitted parameter name is unresolved at a dispatcher
exactly when no binding in that dispatcher's subtree has applied it.

Named string parameters are routed through a tree of dispatchers, coerced
to the kind each setter expects, and replayed to dispatchers attached
after the submission.
"""
