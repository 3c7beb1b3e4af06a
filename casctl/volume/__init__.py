"""Volume listing and describing for cStor, Jiva, LVM LocalPV and ZFS LocalPV, with a dispatcher."""