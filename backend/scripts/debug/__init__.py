# Manual smoke checks. Each script prints its results and exits 0/1.
