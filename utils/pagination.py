# utils/pagination.py


def paginate(query, page: int, limit: int):
     """
     Apply offset/limit to `query`.

     Returns:
          (rows, pagination) where pagination is {page, limit, total, pages}
     """
     page = max(page, 1)
     limit = max(limit, 1)
     total = query.order_by(None).count()
     rows = query.offset((page - 1) * limit).limit(limit).all()
     return rows, {
          "page": page,
          "limit": limit,
          "total": total,
          "pages": (total + limit - 1) // limit,
     }
