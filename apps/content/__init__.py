"""Page content app.

Text, colors and images of admin-editable page elements, edited as
batches of typed change commands.
"""
