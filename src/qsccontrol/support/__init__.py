"""
Small building blocks shared by the conduit, pool and client layers: deadlines and reuse periods,
event sources and value-object mixins.
"""
