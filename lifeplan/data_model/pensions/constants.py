GENERAL = "allman"
OCCUPATIONAL = "tjanste"
PRIVATE = "privat"
