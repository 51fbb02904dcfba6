"""SoundCloud API access: credentials, enumeration, media resolution"""
