"""
ChefBot restaurant recommendation service.

Run the API with ``python -m chefbot`` or ``uvicorn chefbot.app:app``.
"""
