"""Dataset loading and tabular views.

The loader decodes a dataset JSON file into the pydantic `Dataset` model;
the frame helpers turn selected records into pandas DataFrames for display.
"""
