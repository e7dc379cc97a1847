"""JSON schemas shipped with citygraph."""
