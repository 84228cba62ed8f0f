"""Aggregation pipeline builders.

Every function returns a plain list of stages; nothing here talks to the
server, so pipelines can be inspected or tested before being passed to
``Collection.aggregate``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Sequence

from bson import ObjectId

Pipeline = List[Dict[str, Any]]


def _check_limit(limit: int) -> None:
    if limit <= 0:
        raise ValueError("limit must be a positive integer")


def sales_by_category() -> Pipeline:
    return [
        {
            "$group": {
                "_id": "$category",
                "totalProducts": {"$sum": 1},
                "avgPrice": {"$avg": "$price"},
                "maxPrice": {"$max": "$price"},
                "minPrice": {"$min": "$price"},
                "totalValue": {"$sum": "$price"},
            }
        },
        {"$sort": {"totalValue": -1}},
    ]


def expensive_products(category: str = "electronics", min_price: float = 500, discount: float = 0.1) -> Pipeline:
    if not 0 <= discount < 1:
        raise ValueError("discount must be in [0, 1)")
    discount_expr = {"$multiply": ["$price", discount]}
    return [
        {"$match": {"category": category, "price": {"$gt": min_price}}},
        {
            "$project": {
                "name": 1,
                "price": 1,
                "discount": discount_expr,
                "finalPrice": {"$subtract": ["$price", discount_expr]},
            }
        },
    ]


def orders_with_users(limit: int = 5) -> Pipeline:
    _check_limit(limit)
    return [
        {
            "$lookup": {
                "from": "users",
                "localField": "userId",
                "foreignField": "_id",
                "as": "userDetails",
            }
        },
        # orders without a matching user drop out here, like an inner join
        {"$unwind": "$userDetails"},
        {
            "$project": {
                "orderNumber": 1,
                "total": 1,
                "userDetails.name": 1,
                "userDetails.email": 1,
            }
        },
        {"$limit": limit},
    ]


def monthly_revenue(status: str = "completed") -> Pipeline:
    return [
        {"$match": {"status": status}},
        {
            "$group": {
                "_id": {
                    "year": {"$year": "$createdAt"},
                    "month": {"$month": "$createdAt"},
                },
                "totalRevenue": {"$sum": "$total"},
                "orderCount": {"$sum": 1},
                "avgOrderValue": {"$avg": "$total"},
            }
        },
        {"$sort": {"_id.year": -1, "_id.month": -1}},
        {
            "$project": {
                "_id": 0,
                "year": "$_id.year",
                "month": "$_id.month",
                "totalRevenue": {"$round": ["$totalRevenue", 2]},
                "orderCount": 1,
                "avgOrderValue": {"$round": ["$avgOrderValue", 2]},
            }
        },
    ]


def top_rated_products(limit: int = 3) -> Pipeline:
    _check_limit(limit)
    return [
        {"$match": {"reviews": {"$exists": True, "$ne": []}}},
        {
            "$project": {
                "name": 1,
                "avgRating": {"$avg": "$reviews.rating"},
                "reviewCount": {"$size": "$reviews"},
                "latestReview": {"$arrayElemAt": ["$reviews", -1]},
            }
        },
        {"$sort": {"avgRating": -1}},
        {"$limit": limit},
    ]


def product_dashboard(boundaries: Sequence[float] = (0, 100, 500, 1000, 10000)) -> Pipeline:
    """Faceted price buckets, per-category counts and overall stats in one pass."""
    bounds = list(boundaries)
    if len(bounds) < 2:
        raise ValueError("$bucket needs at least two boundaries")
    if any(a >= b for a, b in zip(bounds, bounds[1:])):
        raise ValueError("bucket boundaries must be strictly ascending")

    return [
        {
            "$facet": {
                "priceRanges": [
                    {
                        "$bucket": {
                            "groupBy": "$price",
                            "boundaries": bounds,
                            "default": "Other",
                            "output": {
                                "count": {"$sum": 1},
                                "products": {"$push": "$name"},
                            },
                        }
                    }
                ],
                "categoryStats": [
                    {"$group": {"_id": "$category", "count": {"$sum": 1}}},
                ],
                "overallStats": [
                    {
                        "$group": {
                            "_id": None,
                            "totalProducts": {"$sum": 1},
                            "avgPrice": {"$avg": "$price"},
                            "totalValue": {"$sum": "$price"},
                        }
                    }
                ],
            }
        }
    ]


def category_price_stats() -> Pipeline:
    return [
        {
            "$group": {
                "_id": "$category",
                "avgPrice": {"$avg": "$price"},
                "count": {"$sum": 1},
            }
        }
    ]


def populate_order(order_id: ObjectId) -> Pipeline:
    """Resolve an order's user and item products server-side.

    The user keeps only name/email and each item's product only name/price.
    Items whose product no longer exists get ``product: None``.
    """
    return [
        {"$match": {"_id": order_id}},
        {
            "$lookup": {
                "from": "users",
                "localField": "user",
                "foreignField": "_id",
                "pipeline": [{"$project": {"name": 1, "email": 1}}],
                "as": "user",
            }
        },
        {"$unwind": {"path": "$user", "preserveNullAndEmptyArrays": True}},
        {
            "$lookup": {
                "from": "products",
                "localField": "items.product",
                "foreignField": "_id",
                "pipeline": [{"$project": {"name": 1, "price": 1}}],
                "as": "_products",
            }
        },
        {
            "$set": {
                "items": {
                    "$map": {
                        "input": "$items",
                        "as": "item",
                        "in": {
                            "$mergeObjects": [
                                "$$item",
                                {
                                    "product": {
                                        "$ifNull": [
                                            {
                                                "$first": {
                                                    "$filter": {
                                                        "input": "$_products",
                                                        "as": "p",
                                                        "cond": {"$eq": ["$$p._id", "$$item.product"]},
                                                    }
                                                }
                                            },
                                            None,
                                        ]
                                    }
                                },
                            ]
                        },
                    }
                }
            }
        },
        {"$unset": "_products"},
    ]
