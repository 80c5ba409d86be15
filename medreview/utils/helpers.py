import os
from typing import Optional


def save_to_file(output_directory: Optional[str], filename: str, content: str):
    if output_directory is not None:
        target = os.path.join(output_directory, filename)
    else:
        target = filename
    with open(target, "w") as f:
        f.write(content)
    return target
