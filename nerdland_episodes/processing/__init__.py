"""Text processing for episode descriptions"""
