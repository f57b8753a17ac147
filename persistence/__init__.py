"""
Reading k6 results and writing Allure reports.
"""
