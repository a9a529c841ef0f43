"""framekit — frame-driven animation and timeline engine.

Every scene is a pure function of an integer frame index: values are
sampled with interpolation, easing curves and closed-form springs, and
nested timeline nodes remap and clip each subtree's view of the current
frame. Compositions are registered by id and can be rendered frame by
frame in any order, from any number of processes.
"""
