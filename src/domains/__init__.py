"""Domain layer (records, stock classification, filtering, prompts).

Domain modules should not depend on UI or on the HTTP clients. Anything that
talks to the backend or the text-generation API is passed in by the controller.
"""
