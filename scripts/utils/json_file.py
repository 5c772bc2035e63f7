import json
import os


def load(filename, default=None):
    # loads the json content of a file
    # (missing file raises unless a default is given)

    if default is not None and not os.path.exists(filename):
        return default

    with open(filename) as file:
        return json.load(file)


def save(filename, content):
    # saves the json content to a file, creating parent dirs

    dirname = os.path.dirname(filename)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    with open(filename, "w") as outfile:
        json.dump(content, outfile, indent=2, sort_keys=True)
        outfile.write("\n")

    return filename
