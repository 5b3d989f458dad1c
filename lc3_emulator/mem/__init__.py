# 64K-word memory.
