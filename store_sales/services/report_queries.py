from sqlalchemy import text
from sqlalchemy.orm import Session


def monthly_sales(db: Session) -> list[dict]:
    # noinspection SqlNoDataSourceInspection
    sql = text(
        """
        SELECT
            s.month AS month,
            COUNT(s.id) AS total_sales,
            COALESCE(SUM(s.quantity * s.price), 0) AS total_revenue
        FROM sales s
        GROUP BY s.month
        ORDER BY s.month
        """
    )
    rows = db.execute(sql).mappings().all()
    return [dict(row) for row in rows]


def top_items(db: Session, limit: int = 10) -> list[dict]:
    # noinspection SqlNoDataSourceInspection
    sql = text(
        """
        SELECT
            s.item_name AS item_name,
            SUM(s.quantity) AS total_quantity,
            SUM(s.quantity * s.price) AS total_revenue
        FROM sales s
        GROUP BY s.item_name
        ORDER BY total_revenue DESC, s.item_name
        LIMIT :limit
        """
    )
    rows = db.execute(sql, {"limit": limit}).mappings().all()
    return [dict(row) for row in rows]


def store_performance(db: Session) -> list[dict]:
    # noinspection SqlNoDataSourceInspection
    sql = text(
        """
        SELECT
            st.id AS store_id,
            st.name AS store_name,
            COALESCE(SUM(s.quantity), 0) AS total_quantity,
            COALESCE(SUM(s.quantity * s.price), 0) AS total_revenue
        FROM stores st
        LEFT JOIN sales s ON s.store_id = st.id
        GROUP BY st.id, st.name
        ORDER BY total_revenue DESC, st.name
        """
    )
    rows = db.execute(sql).mappings().all()
    return [dict(row) for row in rows]


__all__ = ["monthly_sales", "store_performance", "top_items"]
