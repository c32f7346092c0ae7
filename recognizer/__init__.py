"""
Recognizer root package.

Decides from a single still image whether the person in it matches one of a
fixed set of reference faces, and publishes the decision over MQTT. Contains
the FastAPI entry point (main.py), the file-watch front end, the recognition
pipeline, and the AWS Rekognition / MQTT / OpenCV adapters.
"""
