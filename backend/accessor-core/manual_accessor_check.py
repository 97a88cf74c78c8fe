import json
import sys

import requests # type: ignore

# usage: python manual_accessor_check.py path/to/Person.java [--cir]
FILE_PATH = sys.argv[1] if len(sys.argv) > 1 else "Person.java"
SERVICE_URL = "http://127.0.0.1:7075/accessors"

# read the file content
with open(FILE_PATH, "r", encoding="utf-8") as f:
    code = f.read()

# prepare data
payload = {
    "code": code,
    "filename": FILE_PATH.replace("\\", "/").split("/")[-1],
    "include_cir": "--cir" in sys.argv,
}

# send request to the running service
response = requests.post(SERVICE_URL, json=payload, timeout=30)

# print result
print(json.dumps(response.json(), indent=2))
