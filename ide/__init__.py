"""
PayJar IDE 后端包
"""
