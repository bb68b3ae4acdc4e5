"""
Command-line interface modules.

Provides CLI entry points for:
- train_model: Build the bundled default model
- predict: Categorize a transaction description
- personalize: Update, reset or export the personalized model
- api_server: Start the REST API
"""
