# utils/serializers.py
from sqlalchemy import inspect


def model_to_dict(obj, exclude=(), **extra) -> dict:
     """
     Plain dict of a mapped object's column attributes, plus any extra keys.
     Use `exclude` to drop secrets (password_hash) or heavy blobs.
     """
     if obj is None:
          return None
     data = {
          attr.key: getattr(obj, attr.key)
          for attr in inspect(obj).mapper.column_attrs
          if attr.key not in exclude
     }
     data.update(extra)
     return data


def row_to_dict(row, exclude=()) -> dict:
     """
     Flatten a query row of the form (Entity, label1, label2, ...) into one dict.
     """
     entity, *_ = row
     mapping = row._mapping
     extra = {key: mapping[key] for key in mapping.keys() if key != type(entity).__name__}
     return model_to_dict(entity, exclude=exclude, **extra)
