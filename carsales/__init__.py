"""
carsales: data core for the used-car sales dashboard.

Loads the car_prices dataset, categorizes each sale (year range, region, body
type, mileage and price buckets), deduplicates and aggregates the records, and
produces the data behind each dashboard chart.
"""

__version__ = "0.1.0"
