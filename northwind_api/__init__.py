"""Northwind trading API: customers, suppliers, products, orders and order items."""
